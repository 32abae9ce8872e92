from __future__ import annotations
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Generator,
    Literal,
    Iterable,
    Iterator,
    Tuple,
    Set,
    List,
    Optional,
    Union,
    TypeVar,
    TYPE_CHECKING,
)
import logging

from corefanchor.pipeline.progress import (
    NoopProgressReporter,
    ProgressReporter,
    get_progress_reporter,
    progress_,
)

if TYPE_CHECKING:
    from corefanchor.pipeline.corefs.mentions import CorefChain


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Span:
    """A half-open token interval ``[start, end)``"""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end))

    def overlaps(self, other: Span) -> bool:
        return self.start < other.end and other.start < self.end


@dataclass
class Token:
    #: surface form, as found in the raw text
    text: str
    #: part of speech tag (Penn treebank)
    pos: str
    #: NER class, ``"O"`` when the token is outside of any entity
    ner: str = "O"
    #: normalized form.  Defaults to ``text``.
    word: Optional[str] = None
    #: normalized temporal value, if the token is part of a temporal
    #: expression
    timex_value: Optional[str] = None
    #: canonical string this token refers to
    antecedent: Optional[str] = None
    #: ``True`` if the token refers to its antecedent without
    #: spelling it out
    is_coreferent: Optional[bool] = None

    def __post_init__(self):
        if self.word is None:
            self.word = self.text


@dataclass
class Sentence:
    tokens: List[Token]
    #: raw sentence text.  Defaults to the surface tokens joined by
    #: spaces.
    text: Optional[str] = None
    #: all antecedents seen in this sentence
    antecedents: Set[str] = field(default_factory=set)
    #: ``True`` if the entity is only referred to through
    #: coreference in this sentence, ``False`` if it appears
    #: verbatim.  ``None`` until decided.
    is_coreferent: Optional[bool] = None
    #: for a target string, spans recognized as alternate names
    alternate_names: Dict[str, Set[Span]] = field(default_factory=dict)

    def __post_init__(self):
        if self.text is None:
            self.text = " ".join(token.text for token in self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def span_text(self, span: Span) -> str:
        return " ".join(self.tokens[i].text for i in span)

    def add_alternate_name(self, name: str, span: Span):
        self.alternate_names.setdefault(name, set()).add(span)

    @staticmethod
    def from_tagged(tagged: str, text: Optional[str] = None) -> Sentence:
        """Create a sentence from a string of space separated
        ``word/POS/NER`` triples, as in ``"Barack/NNP/PERSON
        Obama/NNP/PERSON was/VBD/O born/VBN/O"``.

        .. note::

            The NER tag can be omitted (``word/POS``), in which case
            it defaults to ``"O"``.
        """
        from corefanchor.ner_utils import parse_tagged_token

        return Sentence(
            [parse_tagged_token(tagged_token) for tagged_token in tagged.split()],
            text=text,
        )


@dataclass
class Document:
    sentences: List[Sentence]
    #: ``(sentence index, span)`` of the first recorded mention of the
    #: target entity
    canonical_entity_span: Optional[Tuple[int, Span]] = None
    #: ``(sentence index, span)`` of the first recorded mention of the
    #: target slot value
    canonical_slot_span: Optional[Tuple[int, Span]] = None

    def __len__(self) -> int:
        return len(self.sentences)

    def set_canonical_span(
        self, name: str, target: TargetPair, sentence_i: int, span: Span
    ):
        """Record ``span`` as the canonical span of ``name`` if
        ``name`` is a target string.  Canonical spans are write-once:
        an already recorded span is never replaced.
        """
        if name == target.entity and self.canonical_entity_span is None:
            self.canonical_entity_span = (sentence_i, span)
        if (
            not target.slot_value is None
            and name == target.slot_value
            and self.canonical_slot_span is None
        ):
            self.canonical_slot_span = (sentence_i, span)

    def all_antecedents(self) -> Set[str]:
        """
        :return: the union of all sentences antecedents
        """
        return {a for sentence in self.sentences for a in sentence.antecedents}

    def reset_annotations(self):
        """Clear the annotations made for a previous target pair:
        canonical spans, sentences antecedents, alternate names and
        coreferent flags, and tokens antecedents.

        .. note::

            POS and NER tags forced on acronyms are kept.
        """
        self.canonical_entity_span = None
        self.canonical_slot_span = None
        for sentence in self.sentences:
            sentence.antecedents = set()
            sentence.is_coreferent = None
            sentence.alternate_names = {}
            for token in sentence.tokens:
                token.antecedent = None
                token.is_coreferent = None

    @staticmethod
    def from_tagged(tagged_sentences: List[str]) -> Document:
        """Create a document from a list of tagged sentences.  See
        :meth:`.Sentence.from_tagged` for the expected format.
        """
        return Document([Sentence.from_tagged(s) for s in tagged_sentences])


@dataclass(frozen=True)
class TargetPair:
    """A target entity, optionally paired with a target slot value"""

    entity: str
    entity_type: Optional[str] = None
    slot_value: Optional[str] = None
    slot_value_type: Optional[str] = None

    @property
    def entity_tokens(self) -> List[str]:
        return self.entity.split()

    @property
    def slot_value_tokens(self) -> Optional[List[str]]:
        if self.slot_value is None:
            return None
        return self.slot_value.split()

    def is_target(self, name: Optional[str]) -> bool:
        """Is ``name`` the entity name or the slot value ?"""
        if name is None:
            return False
        return name == self.entity or (
            not self.slot_value is None and name == self.slot_value
        )


class PipelineStep:
    """A step of a :class:`Pipeline`.  A step declares the state
    attributes it reads (:meth:`needs` and :meth:`optional_needs`) and
    the ones it writes (:meth:`production`), so that a pipeline can be
    checked before being run.

    .. note::

        Derived classes must override ``__call__``, ``needs`` and
        ``production``.
    """

    def __init__(self):
        # defaults for steps called outside of a pipeline
        self.lang = "eng"
        self.progress_reporter: ProgressReporter = NoopProgressReporter()

    def _pipeline_init_(self, lang: str, progress_reporter: ProgressReporter):
        """Configure the step with the parameters of its pipeline

        :raise ValueError: if ``lang`` is not supported by this step
        """
        supported_langs = self.supported_langs()
        if supported_langs != "any" and not lang in supported_langs:
            raise ValueError(
                f"{self.__class__.__name__} does not support lang {lang} (supported langs: {supported_langs})"
            )
        self.lang = lang
        self.progress_reporter = progress_reporter

    T = TypeVar("T")

    def _progress_(
        self, it: Iterable[T], total: Optional[int] = None
    ) -> Generator[T, None, None]:
        yield from progress_(self.progress_reporter, it, total)

    def __call__(self, document: Document, **kwargs) -> Dict[str, Any]:
        """Annotate ``document`` in place

        :return: the state attributes to update
        """
        raise NotImplementedError()

    def supported_langs(self) -> Union[Set[str], Literal["any"]]:
        """
        :return: supported languages, as ISO 639-3 codes, or ``'any'``
        """
        return {"eng"}

    def needs(self) -> Set[str]:
        raise NotImplementedError()

    def optional_needs(self) -> Set[str]:
        return set()

    def production(self) -> Set[str]:
        raise NotImplementedError()


@dataclass
class PipelineState:
    """The state of a pipeline, annotated in a :class:`Pipeline` lifetime"""

    #: annotated document.  Steps mutate its sentences and tokens in
    #: place.
    document: Optional[Document]

    #: raw input text, when the document has to be built by a step
    text: Optional[str] = None

    #: the target entity and slot value of the resolution pass
    target: Optional[TargetPair] = None

    #: raw coreference chains, keyed by chain id
    corefs: Optional[Dict[int, CorefChain]] = None

    #: antecedents chosen for coreference chains
    coref_antecedents: Optional[Set[str]] = None

    #: target strings found verbatim or as acronyms
    literal_antecedents: Optional[Set[str]] = None

    #: normalized temporal values set as antecedents
    timex_antecedents: Optional[Set[str]] = None

    #: indices of sentences usable for relation extraction
    relevant_sentences: Optional[Set[int]] = None


class Pipeline:
    """Run a sequence of :class:`PipelineStep` over a shared
    :class:`PipelineState`.

    >>> pipeline = Pipeline([LiteralCorefAnnotator(), RelevantSentencesSelector()])
    >>> state = pipeline(document, target=TargetPair("Apple"))
    >>> state.relevant_sentences
    """

    def __init__(
        self,
        steps: List[PipelineStep],
        lang: str = "eng",
        progress_report: Optional[Literal["tqdm"]] = "tqdm",
        warn: bool = True,
    ) -> None:
        """
        :param steps: steps, executed in order
        :param lang: ISO 639-3 language code
        :param progress_report: ``"tqdm"`` to display the pipeline
            progress with tqdm, ``None`` to stay silent.
        :param warn: if ``True``, log unsatisfied optional needs
        """
        self.steps = steps
        self.lang = lang
        self.progress_report = progress_report
        self.progress_reporter = get_progress_reporter(progress_report)
        self.warn = warn

    def _active_steps(self, ignored_steps: Optional[List[str]]) -> List[PipelineStep]:
        """
        :param ignored_steps: steps productions.  A step producing
            any of them is left out.
        """
        if ignored_steps is None:
            return list(self.steps)
        ignored = set(ignored_steps)
        return [step for step in self.steps if step.production().isdisjoint(ignored)]

    def check_valid(
        self, *args, ignored_steps: Optional[List[str]] = None
    ) -> Tuple[bool, List[str]]:
        """Check that the needs of each step are produced by the
        previous ones (or given when calling the pipeline).

        :param args: attributes of the starting state, in addition to
            ``document``
        :param ignored_steps: see :meth:`__call__`

        :return: ``(True, [warnings])`` if the pipeline can be run,
            ``(False, [errors])`` otherwise
        """
        available = {"document", *args}
        warnings = []

        for i, step in enumerate(self._active_steps(ignored_steps), start=1):
            step_name = f"step {i} ({step.__class__.__name__})"

            missing = step.needs() - available
            if len(missing) > 0:
                return (
                    False,
                    [f"{step_name} has unsatisfied needs: {missing} (available: {available})"],
                )

            missing_optional = step.optional_needs() - available
            if len(missing_optional) > 0:
                warnings.append(
                    f"{step_name} has unsatisfied optional needs: {missing_optional} (available: {available})"
                )

            available |= step.production()

        return (True, warnings)

    def __call__(
        self,
        document: Optional[Document] = None,
        ignored_steps: Optional[List[str]] = None,
        **kwargs,
    ) -> PipelineState:
        """Run the pipeline sequentially.

        :param document: the document to annotate
        :param ignored_steps: steps productions.  Steps producing any
            of them are not run.
        :param kwargs: additional state attributes (``target``,
            ``corefs``...)

        :raise ValueError: if the pipeline is not valid (see
            :meth:`check_valid`)

        :return: the final pipeline state
        """
        is_valid, messages = self.check_valid(
            *kwargs.keys(), ignored_steps=ignored_steps
        )
        if not is_valid:
            raise ValueError(messages)
        if self.warn:
            for message in messages:
                logger.warning(message)

        steps = self._active_steps(ignored_steps)
        steps_reporter = self.progress_reporter.get_subreporter()
        for step in steps:
            step._pipeline_init_(self.lang, steps_reporter)

        state = PipelineState(document)
        for key, value in kwargs.items():
            setattr(state, key, value)

        for step in progress_(self.progress_reporter, steps):
            self.progress_reporter.update_message_(step.__class__.__name__)
            for key, value in step(**vars(state)).items():
                setattr(state, key, value)

        return state
