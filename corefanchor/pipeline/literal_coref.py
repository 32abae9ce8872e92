from __future__ import annotations
from typing import Any, Dict, List, Optional, Set, Literal, Union
import logging
from corefanchor.ner_utils import ORGANIZATION_TAG, expand_named_entity_span
from corefanchor.pipeline.core import (
    Document,
    PipelineStep,
    Sentence,
    Span,
    TargetPair,
)
from corefanchor.resources.stopwords import is_a_stopword


logger = logging.getLogger(__name__)


def approximate_match(target_token: str, token: str) -> bool:
    """Check if a document token approximately matches a target token.
    For example, 'Nuclear Supplier Group' matches 'Nuclear Suppliers
    Group', and 'ABC Corp' matches 'ABC Corp.'.

    :param target_token: a token of the target string
    :param token: the document token
    """
    if target_token.lower() == token.lower():
        return True
    if token == target_token + "s" or token == target_token + "es":
        return True
    if token == target_token + "." or target_token == token + ".":
        return True
    return False


def is_acronym(text: str, target_tokens: List[str], lang: str = "eng") -> bool:
    """Check if ``text`` is an acronym of ``target_tokens``, as 'IBM'
    for 'International Business Machines'.  Stopwords can either be
    matched by their lowercase initial (as in 'BoA' for 'Bank of
    America') or skipped (as in 'BA' for 'Bank of America').

    .. note::

        ``text`` is not required to be entirely consumed by
        ``target_tokens`` initials.
    """
    text_i = 0
    for target_token in target_tokens:
        if len(target_token) == 0:
            return False
        if text_i >= len(text):
            return False
        if target_token[0].upper() == text[text_i]:
            text_i += 1
            continue
        if is_a_stopword(target_token, lang):
            if target_token[0] == text[text_i]:
                text_i += 1
            continue
        return False
    return True


class LiteralCorefAnnotator(PipelineStep):
    """Annotate all verbatim (or approximate) mentions of the entity
    name and of the slot value, as well as their acronyms.  This
    catches mentions that were missed by the coreference resolver.
    """

    #: minimum number of target tokens, and of characters, for a token
    #: to be considered as an acronym
    MIN_ACRONYM_LEN = 3

    def __call__(
        self, document: Document, target: TargetPair, **kwargs
    ) -> Dict[str, Any]:
        """
        :param document: the document to annotate in place
        :param target:
        """
        antecedents = set()
        try:
            if self.annotate_literal_coref(
                document,
                target,
                target.entity,
                target.entity_type,
                target.entity_tokens,
            ):
                antecedents.add(target.entity)
            if not target.slot_value is None and self.annotate_literal_coref(
                document,
                target,
                target.slot_value,
                target.slot_value_type,
                target.slot_value_tokens,  # type: ignore
            ):
                antecedents.add(target.slot_value)
        except Exception:
            logger.error("could not annotate literal mentions", exc_info=True)

        return {"document": document, "literal_antecedents": antecedents}

    def annotate_literal_coref(
        self,
        document: Document,
        target: TargetPair,
        name: str,
        name_type: Optional[str],
        name_tokens: List[str],
    ) -> bool:
        """Annotate all mentions of ``name`` in ``document``

        :param document:
        :param target:
        :param name: the target string to match
        :param name_type: NER tag of ``name``, if known
        :param name_tokens: ``name``, split into tokens

        :return: ``True`` if at least one mention was found
        """
        if len(name_tokens) == 0:
            return False

        found = False
        for sentence_i, sentence in enumerate(document.sentences):
            match_i = 0

            for i, token in enumerate(sentence.tokens):
                # string match
                if approximate_match(
                    name_tokens[match_i], token.text
                ) or approximate_match(name_tokens[match_i], token.word):  # type: ignore
                    match_i += 1
                else:
                    match_i = 0

                if match_i >= len(name_tokens):
                    span = Span(i + 1 - match_i, i + 1)
                    found = True
                    self._set_literal_antecedent(sentence, span, name)
                    document.set_canonical_span(name, target, sentence_i, span)
                    if name_type is None or name_type == ORGANIZATION_TAG:
                        self._annotate_alternate_name(sentence, span, name)
                    match_i = 0

                # acronym match
                if (
                    len(name_tokens) >= LiteralCorefAnnotator.MIN_ACRONYM_LEN
                    and len(token.text) >= LiteralCorefAnnotator.MIN_ACRONYM_LEN
                    and is_acronym(token.text, name_tokens, self.lang)
                ):
                    logger.debug(f"expanded acronym: {token.text} to {name}")
                    span = Span(i, i + 1)
                    found = True
                    self._set_literal_antecedent(sentence, span, name)
                    token.pos = "NNP"
                    if name_type:
                        token.ner = name_type
                    sentence.add_alternate_name(name, span)
                    document.set_canonical_span(name, target, sentence_i, span)

        return found

    def _set_literal_antecedent(self, sentence: Sentence, span: Span, name: str):
        for i in span:
            sentence.tokens[i].antecedent = name
            sentence.tokens[i].is_coreferent = False
        sentence.antecedents.add(name)
        sentence.is_coreferent = False

    def _annotate_alternate_name(self, sentence: Sentence, span: Span, name: str):
        """Record the named entity enclosing ``span``, if it is
        larger, as an alternate name of ``name`` (as in
        'International Business Machines Corp.' for 'International
        Business Machines').
        """
        alternate_span = expand_named_entity_span(sentence.tokens, span)
        if alternate_span is None or alternate_span == span:
            return
        sentence.add_alternate_name(name, alternate_span)
        self._set_literal_antecedent(sentence, alternate_span, name)

    def supported_langs(self) -> Union[Set[str], Literal["any"]]:
        return {"eng"}

    def needs(self) -> Set[str]:
        return {"target"}

    def optional_needs(self) -> Set[str]:
        return {"coref_antecedents"}

    def production(self) -> Set[str]:
        return {"literal_antecedents"}
