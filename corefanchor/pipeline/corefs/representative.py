"""Choose the antecedent of a cleaned coreference chain.

The antecedent is chosen by a cascade of tiers, each tier being a
function ``(chain, ner, context) -> Optional[str]``.  Tiers are tried
in order, until one of them returns an antecedent:

1. a mention exactly matching the entity name or the slot value
2. a mention containing the entity name or the slot value
3. a mention whose tokens all match the chain NER tag (preference to
   the representative mention, then longest to shortest)
4. the longest NER phrase grown from a mention head
5. a mention head, preferring proper nouns, then plural nouns, then
   nouns
"""
from __future__ import annotations
from typing import Callable, FrozenSet, List, Optional, Tuple
from dataclasses import dataclass
from collections import Counter
import re
from corefanchor.ner_utils import OUTSIDE_TAG, PERSON_TAG
from corefanchor.pipeline.core import Document, Token, TargetPair
from corefanchor.pipeline.corefs.mentions import CleanedChain, CorefMention
from corefanchor.pipeline.name_stats import NameStatistics
from corefanchor.utils import Lazy


@dataclass
class ResolutionContext:
    """Everything needed to choose the antecedent of the chains of a
    document, for one target pair.
    """

    document: Document
    target: TargetPair
    #: name statistics for the entity name
    entity_stats: Lazy[NameStatistics]
    #: name statistics for the slot value, if there is one
    slot_value_stats: Optional[Lazy[NameStatistics]] = None
    #: names that are never folded onto a target
    common_names: FrozenSet[str] = frozenset()
    #: whether to fold partial names onto a target
    approximate_names: bool = True

    def tokens(self, mention: CorefMention) -> List[Token]:
        """
        :return: the tokens of the sentence containing ``mention``
        """
        return self.document.sentences[mention.sentence_idx].tokens

    def head(self, mention: CorefMention) -> Token:
        return self.tokens(mention)[mention.head_idx]


def majority_ner(chain: CleanedChain, document: Document) -> Optional[str]:
    """Each mention of ``chain`` votes with the NER tag of its head
    token.  ``"O"`` votes are ignored.

    :return: the most voted tag (ties are broken by order of first
        vote), or ``None`` if no mention has a named entity head.
    """
    votes = Counter()
    for mention in chain.mentions:
        head = document.sentences[mention.sentence_idx].tokens[mention.head_idx]
        votes[head.ner] += 1
    del votes[OUTSIDE_TAG]
    if len(votes) == 0:
        return None
    return votes.most_common(1)[0][0]


def mention_matches_ner(
    mention: CorefMention, ner: str, context: ResolutionContext
) -> bool:
    """Check that every token of ``mention`` has the NER tag ``ner``.
    This prevents overly greedy mentions from being chosen.
    """
    tokens = context.tokens(mention)
    return all(tokens[i].ner == ner for i in mention.span)


def exact_match_antecedent(
    chain: CleanedChain, ner: Optional[str], context: ResolutionContext
) -> Optional[str]:
    target = context.target
    for mention in chain.mentions:
        if mention.text.lower() == target.entity.lower() or (
            not target.slot_value is None
            and mention.text.lower() == target.slot_value.lower()
        ):
            return mention.text
    return None


def containment_antecedent(
    chain: CleanedChain, ner: Optional[str], context: ResolutionContext
) -> Optional[str]:
    target = context.target
    names = [(target.entity, target.entity_tokens)]
    if not target.slot_value is None:
        names.append((target.slot_value, target.slot_value_tokens))
    for name, name_tokens in names:
        for mention in chain.mentions:
            if (
                name.lower() in mention.text.lower()
                and len(mention) <= len(name_tokens) + 2
            ):
                return mention.text
    return None


def ner_compatible_antecedent(
    chain: CleanedChain, ner: Optional[str], context: ResolutionContext
) -> Optional[str]:
    if ner is None:
        return None

    representative = chain.representative_mention
    if not representative is None and mention_matches_ner(
        representative, ner, context
    ):
        return representative.text

    mentions_by_length = sorted(
        chain.mentions, key=lambda m: (-len(m), m.sentence_idx, m.start_idx)
    )
    for mention in mentions_by_length:
        if mention_matches_ner(mention, ner, context):
            return mention.text

    return None


def head_ner_span_antecedent(
    chain: CleanedChain, ner: Optional[str], context: ResolutionContext
) -> Optional[str]:
    """Grow a phrase of tokens sharing ``ner`` around each mention
    head, and keep the longest one (ties broken by order of
    appearance).
    """
    if ner is None:
        return None

    best: Optional[Tuple[int, int, List[Token]]] = None
    for mention in chain.mentions:
        tokens = context.tokens(mention)
        if tokens[mention.head_idx].ner != ner:
            continue
        start, end = mention.head_idx, mention.head_idx + 1
        while start > 0 and tokens[start - 1].ner == ner:
            start -= 1
        while end < len(tokens) and tokens[end].ner == ner:
            end += 1
        if best is None or end - start > best[1] - best[0]:
            best = (start, end, tokens)

    if best is None:
        return None
    start, end, tokens = best
    return " ".join(token.text for token in tokens[start:end])


#: patterns on lowercased head POS tags, by order of preference
HEAD_POS_PATTERNS = [re.compile(p) for p in ("nnp.*", "nns.*", "n.*", ".*")]


def head_pos_antecedent(
    chain: CleanedChain, ner: Optional[str], context: ResolutionContext
) -> Optional[str]:
    for pattern in HEAD_POS_PATTERNS:
        for mention in chain.mentions:
            head = context.head(mention)
            if pattern.fullmatch(head.pos.lower()):
                return head.text
    return None


AntecedentTier = Callable[
    [CleanedChain, Optional[str], ResolutionContext], Optional[str]
]

ANTECEDENT_TIERS: Tuple[AntecedentTier, ...] = (
    exact_match_antecedent,
    containment_antecedent,
    ner_compatible_antecedent,
    head_ner_span_antecedent,
    head_pos_antecedent,
)


def canonicalize_antecedent(
    antecedent: str, ner: Optional[str], context: ResolutionContext
) -> str:
    """Rewrite an antecedent to the entity name or the slot value when
    it contains it, or (if enabled) when it is a partial person name
    that can be safely folded onto it.
    """
    target = context.target

    if target.entity.lower() in antecedent.lower():
        antecedent = target.entity
    if (
        not target.slot_value is None
        and target.slot_value.lower() in antecedent.lower()
    ):
        antecedent = target.slot_value

    if (
        context.approximate_names
        and ner == PERSON_TAG
        and not antecedent in context.common_names
    ):
        if context.entity_stats.get().partial_name_matches_entity(
            target.entity, antecedent
        ):
            antecedent = target.entity
        if (
            not target.slot_value is None
            and not context.slot_value_stats is None
            and context.slot_value_stats.get().partial_name_matches_entity(
                target.slot_value, antecedent
            )
        ):
            antecedent = target.slot_value

    return antecedent


def choose_antecedent(
    chain: CleanedChain, ner: Optional[str], context: ResolutionContext
) -> str:
    """Choose the antecedent of a chain using ``ANTECEDENT_TIERS``

    :param chain: a cleaned chain
    :param ner: the NER tag of the chain, as given by
        :func:`majority_ner`
    :param context:

    :raise RuntimeError: if no tier could find an antecedent, which
        only happens for malformed chains.
    """
    for tier in ANTECEDENT_TIERS:
        antecedent = tier(chain, ner, context)
        if not antecedent is None:
            return canonicalize_antecedent(antecedent, ner, context)
    raise RuntimeError(f"could not find antecedent for chain with: {chain.mentions}")
