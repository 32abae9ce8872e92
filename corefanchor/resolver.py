from __future__ import annotations
from typing import Dict, FrozenSet, Literal, Optional, Set
import logging
from corefanchor.pipeline.core import Document, PipelineState, TargetPair
from corefanchor.pipeline.corefs.mentions import CorefChain
from corefanchor.pipeline.preconfigured import post_coref_pipeline
from corefanchor.resources.names import load_common_names


logger = logging.getLogger(__name__)


class PostCorefResolver:
    """Annotate documents with what refers to a target entity (and
    optionally a target slot value), and find the sentences relevant
    to this target pair.

    >>> resolver = PostCorefResolver()
    >>> relevant = resolver.find_relevant_sentences(
    ...     document, TargetPair("Barack Obama"), corefs
    ... )

    .. note::

        Errors happening while annotating a document are logged and
        never propagated: the document is then left with the
        annotations made so far.
    """

    def __init__(
        self,
        do_coref: bool = True,
        approximate_names: bool = True,
        max_sentence_tokens: int = 100,
        allow_coreferent_sentences: bool = True,
        common_names: Optional[FrozenSet[str]] = None,
        progress_report: Optional[Literal["tqdm"]] = None,
    ) -> None:
        """
        :param do_coref: if ``False``, coreference chains are ignored,
            and only literal mentions of the targets are annotated.
        :param approximate_names: see :class:`.CorefAntecedentAnnotator`
        :param max_sentence_tokens: see :class:`.RelevantSentencesSelector`
        :param allow_coreferent_sentences: see
            :class:`.RelevantSentencesSelector`
        :param common_names: names never folded onto a target.  If
            ``None``, the list shipped with this package is used.
        :param progress_report: passed to :class:`.Pipeline`
        """
        self.do_coref = do_coref
        if common_names is None:
            common_names = load_common_names()
        self.pipeline = post_coref_pipeline(
            coref_annotator_kwargs={
                "approximate_names": approximate_names,
                "common_names": common_names,
            },
            relevance_kwargs={
                "max_sentence_tokens": max_sentence_tokens,
                "allow_coreferent_sentences": allow_coreferent_sentences,
            },
            progress_report=progress_report,
            warn=False,
        )

    def _run(
        self,
        document: Document,
        target: TargetPair,
        corefs: Optional[Dict[int, CorefChain]],
    ) -> Optional[PipelineState]:
        ignored_steps = None if self.do_coref else ["coref_antecedents"]
        try:
            document.reset_annotations()
            return self.pipeline(
                document, ignored_steps=ignored_steps, target=target, corefs=corefs
            )
        except Exception:
            logger.exception(f"could not annotate document for {target}")
            return None

    def annotate(
        self,
        document: Document,
        target: TargetPair,
        corefs: Optional[Dict[int, CorefChain]] = None,
    ) -> Document:
        """Annotate ``document`` in place for ``target``.  Annotations
        made for a previous target pair are cleared first.

        :param document:
        :param target:
        :param corefs: raw coreference chains of ``document``, by chain
            id.
        :return: ``document``
        """
        self._run(document, target, corefs)
        return document

    def find_relevant_sentences(
        self,
        document: Document,
        target: TargetPair,
        corefs: Optional[Dict[int, CorefChain]] = None,
    ) -> Set[int]:
        """Annotate ``document`` in place for ``target``, and return
        the indices of its relevant sentences.
        """
        state = self._run(document, target, corefs)
        if state is None or state.relevant_sentences is None:
            return set()
        return state.relevant_sentences
