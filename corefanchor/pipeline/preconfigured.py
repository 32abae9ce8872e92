from typing import Optional
from corefanchor.pipeline.core import Pipeline


def post_coref_pipeline(
    coref_annotator_kwargs: Optional[dict] = None,
    relevance_kwargs: Optional[dict] = None,
    **pipeline_kwargs,
) -> Pipeline:
    """Return a pre-configured post-coreference pipeline, annotating
    a document for a target pair and selecting its relevant sentences.

    :param coref_annotator_kwargs: kwargs for
        :class:`.CorefAntecedentAnnotator`
    :param relevance_kwargs: kwargs for
        :class:`.RelevantSentencesSelector`
    :param pipeline_kwargs: kwargs for :class:`.Pipeline`
    """
    from corefanchor.pipeline.corefs import CorefAntecedentAnnotator
    from corefanchor.pipeline.literal_coref import LiteralCorefAnnotator
    from corefanchor.pipeline.timex import TimexAnnotator
    from corefanchor.pipeline.relevance import RelevantSentencesSelector

    coref_annotator_kwargs = coref_annotator_kwargs or {}
    relevance_kwargs = relevance_kwargs or {}

    return Pipeline(
        [
            CorefAntecedentAnnotator(**coref_annotator_kwargs),
            LiteralCorefAnnotator(),
            TimexAnnotator(),
            RelevantSentencesSelector(**relevance_kwargs),
        ],
        **pipeline_kwargs,
    )


def corenlp_post_coref_pipeline(
    corenlp_kwargs: Optional[dict] = None,
    coref_annotator_kwargs: Optional[dict] = None,
    relevance_kwargs: Optional[dict] = None,
    **pipeline_kwargs,
) -> Pipeline:
    """Same as :func:`post_coref_pipeline`, but starting from a raw
    text annotated by Stanford CoreNLP.

    :param corenlp_kwargs: kwargs for :class:`.StanfordCoreNLPPipeline`
    """
    from corefanchor.pipeline.stanford_corenlp import StanfordCoreNLPPipeline

    pipeline = post_coref_pipeline(
        coref_annotator_kwargs, relevance_kwargs, **pipeline_kwargs
    )
    pipeline.steps = [StanfordCoreNLPPipeline(**(corenlp_kwargs or {}))] + pipeline.steps
    return pipeline
