from __future__ import annotations
from typing import Any, Dict, FrozenSet, Optional, Set, Literal, Union
import logging
from corefanchor.pipeline.core import Document, PipelineStep, TargetPair
from corefanchor.pipeline.corefs.cleaning import clean_coref_chains
from corefanchor.pipeline.corefs.mentions import CleanedChain, CorefChain
from corefanchor.pipeline.corefs.representative import (
    ResolutionContext,
    choose_antecedent,
    majority_ner,
)
from corefanchor.pipeline.name_stats import NameStatistics
from corefanchor.utils import Lazy


logger = logging.getLogger(__name__)


class CorefAntecedentAnnotator(PipelineStep):
    """Annotate tokens with the antecedent of their coreference
    chain.

    For each coreference chain, an antecedent is chosen (see
    :mod:`corefanchor.pipeline.corefs.representative`) and set on the
    tokens of all the chain mentions.  This step also sets:

    - the antecedents of each sentence
    - the coreferent flag of tokens (``True`` when the mention does
      not spell its antecedent out) and of sentences mentioning the
      entity (``True`` when the entity does not appear verbatim in the
      sentence)
    - the canonical spans of the document, if a chain antecedent is
      the entity name or the slot value

    .. note::

        Only chains with a named entity head are annotated, to cut
        down on spurious chains.
    """

    def __init__(
        self,
        approximate_names: bool = True,
        common_names: Optional[FrozenSet[str]] = None,
    ) -> None:
        """
        :param approximate_names: if ``True``, partial person names
            (such as 'Obama') are folded onto the entity name or the
            slot value (such as 'Barack Obama') when no other person
            in the document could be given that partial name.
        :param common_names: names that are never folded.  See
            :func:`corefanchor.resources.names.load_common_names`.
        """
        self.approximate_names = approximate_names
        self.common_names = common_names or frozenset()
        super().__init__()

    def __call__(
        self,
        document: Document,
        target: TargetPair,
        corefs: Optional[Dict[int, CorefChain]] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        """
        :param document: the document to annotate in place
        :param target:
        :param corefs: raw coreference chains.  When ``None``, the
            document is left untouched.
        """
        if corefs is None:
            logger.warning("document has no coreference chains annotation")
            return {"document": document, "coref_antecedents": set()}

        antecedents = set()
        try:
            antecedents = self.annotate_corefs(document, target, corefs)
        except Exception:
            logger.warning(
                "could not annotate coreferences; continuing anyway", exc_info=True
            )

        return {"document": document, "coref_antecedents": antecedents}

    def annotate_corefs(
        self, document: Document, target: TargetPair, corefs: Dict[int, CorefChain]
    ) -> Set[str]:
        """
        :return: the antecedents set on chains mentions
        """
        context = ResolutionContext(
            document,
            target,
            Lazy(lambda: NameStatistics(document, target.entity)),
            (
                None
                if target.slot_value is None
                else Lazy(lambda: NameStatistics(document, target.slot_value))  # type: ignore
            ),
            common_names=self.common_names,
            approximate_names=self.approximate_names,
        )

        chains = clean_coref_chains(corefs, lang=self.lang)
        antecedents = set()
        for chain in self._progress_(chains):
            ner = majority_ner(chain, document)
            if ner is None:
                continue
            antecedent = choose_antecedent(chain, ner, context)
            self.propagate_antecedent(document, target, chain, antecedent)
            antecedents.add(antecedent)

        for sentence in document.sentences:
            if not target.entity in sentence.antecedents:
                continue
            sentence.is_coreferent = not target.entity in sentence.text
            logger.debug(
                f"marking sentence [{'coref' if sentence.is_coreferent else 'direct'}]: {sentence.text}"
            )

        return antecedents

    def propagate_antecedent(
        self,
        document: Document,
        target: TargetPair,
        chain: CleanedChain,
        antecedent: str,
    ):
        """Set ``antecedent`` on the tokens of all mentions of
        ``chain``.

        When ``antecedent`` is a target string, it is only set on nouns
        and pronouns, but it replaces any previous antecedent.
        Otherwise, it is only set on tokens without antecedent.
        """
        is_target = target.is_target(antecedent)
        for mention in chain.mentions:
            sentence = document.sentences[mention.sentence_idx]
            sentence.antecedents.add(antecedent)
            for i in mention.span:
                token = sentence.tokens[i]
                if is_target and not (
                    token.pos.startswith("NN") or token.pos.startswith("PRP")
                ):
                    continue
                if token.antecedent is None or is_target:
                    token.antecedent = antecedent
                    document.set_canonical_span(
                        antecedent, target, mention.sentence_idx, mention.span
                    )
                token.is_coreferent = mention.text != antecedent

    def supported_langs(self) -> Union[Set[str], Literal["any"]]:
        return {"eng"}

    def needs(self) -> Set[str]:
        return {"target"}

    def optional_needs(self) -> Set[str]:
        return {"corefs"}

    def production(self) -> Set[str]:
        return {"coref_antecedents"}
