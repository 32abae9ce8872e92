from .progress import ProgressReporter
from .core import Document, Pipeline, PipelineState, PipelineStep, Sentence, Span, TargetPair, Token
