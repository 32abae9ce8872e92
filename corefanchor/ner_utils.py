from __future__ import annotations
from typing import List, Optional
from dataclasses import dataclass
from more_itertools import windowed
from corefanchor.pipeline.core import Span, Token


#: tag of tokens outside of any named entity
OUTSIDE_TAG = "O"
PERSON_TAG = "PERSON"
ORGANIZATION_TAG = "ORGANIZATION"

#: tokens that stop the expansion of an organization name (as in
#: "Procter and Gamble")
NAME_EXPANSION_BOUNDARIES = {"and", "&", "&amp;"}


@dataclass
class NEREntity:
    tokens: List[str]
    start_idx: int
    end_idx: int
    #: NER class (as in ``PERSON``)
    tag: str

    def __hash__(self) -> int:
        return hash(tuple(self.tokens) + (self.start_idx, self.end_idx, self.tag))


def ner_entities(tokens: List[str], tags: List[str]) -> List[NEREntity]:
    """Segment a sentence into named entities, given non-BIO NER
    tags (as produced by Stanford CoreNLP: ``PERSON``, ``O``...).  A
    named entity is a maximal run of tokens sharing the same tag.

    :param tokens: the sentence tokens
    :param tags: one NER tag per token, ``"O"`` for tokens outside of
        any entity.

    :raise ValueError: on an inconsistent tag transition, which
        happens when a tag is missing or empty.

    :return: entities, in sentence order
    """
    assert len(tokens) == len(tags)
    if len(tokens) == 0:
        return []

    entities = []
    start_idx = None

    for i, (last_tag, tag) in enumerate(windowed([OUTSIDE_TAG] + list(tags), 2)):
        if last_tag == OUTSIDE_TAG and tag == OUTSIDE_TAG:
            continue

        if not tag:
            raise ValueError(f"unknown NER transition: {last_tag} -> {tag}")

        if last_tag == OUTSIDE_TAG or last_tag == tag:
            # O -> T or T -> T: start or extend the current run
            if start_idx is None:
                start_idx = i
        else:
            # T -> O or T1 -> T2: close the current run
            assert not start_idx is None
            entities.append(NEREntity(tokens[start_idx:i], start_idx, i, last_tag))
            start_idx = None if tag == OUTSIDE_TAG else i

    if not start_idx is None:
        entities.append(
            NEREntity(tokens[start_idx:], start_idx, len(tokens), tags[-1])
        )

    return entities


def expand_named_entity_span(tokens: List[Token], span: Span) -> Optional[Span]:
    """Try to find the largest enclosing named entity span around
    ``span``, by growing it with tokens sharing its NER tag.

    Expansion is only performed for ``PERSON`` and ``ORGANIZATION``
    spans, only over nouns, and stops at conjunctions such as "and"
    or "&".

    :param tokens: sentence tokens
    :param span: the initial span

    :return: the largest span (possibly ``span`` itself) sharing the
        NER tag of ``span``, or ``None`` if ``span`` has no consistent
        NER tag.
    """
    tags = {tokens[i].ner for i in span}
    if len(tags) != 1:
        return None
    tag = tags.pop()
    if not tag in (PERSON_TAG, ORGANIZATION_TAG):
        return None

    def can_expand_to(token: Token) -> bool:
        return (
            token.ner == tag
            and token.pos.startswith("N")
            and not token.text in NAME_EXPANSION_BOUNDARIES
        )

    start, end = span.start, span.end
    while start > 0 and can_expand_to(tokens[start - 1]):
        start -= 1
    while end < len(tokens) and can_expand_to(tokens[end]):
        end += 1
    return Span(start, end)


def parse_tagged_token(tagged_token: str) -> Token:
    """Parse a ``word/POS/NER`` or ``word/POS`` token.  The word
    itself may contain slashes.
    """
    parts = tagged_token.rsplit("/", 2)
    if len(parts) == 3 and parts[2].isupper() and parts[0] != "":
        return Token(parts[0], parts[1], parts[2])
    word, pos = tagged_token.rsplit("/", 1)
    return Token(word, pos)
