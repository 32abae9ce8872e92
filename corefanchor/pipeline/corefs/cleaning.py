from typing import Dict, List, Set, Tuple
from collections import defaultdict
from corefanchor.pipeline.corefs.mentions import CorefChain, CorefMention, CleanedChain
from corefanchor.resources.pronouns import is_a_first_person_pronoun


#: minimum number of first person pronouns in a chain for them to be
#: kept (such chains are likely to come from an interview)
MIN_FIRST_PERSON_PRONOUNS = 3


def clean_coref_chains(
    corefs: Dict[int, CorefChain], lang: str = "eng"
) -> List[CleanedChain]:
    """Remove mentions that are unlikely to be relevant, and nested
    mentions.

    - First person pronouns ('I', 'me'...) are removed, unless a chain
      contains at least ``MIN_FIRST_PERSON_PRONOUNS`` of them.
    - Representative mentions are always kept at this stage.
    - Overlapping mentions are removed globally, over all chains: only
      the shortest mentions are kept (ties are broken by order of
      discovery).  Therefore, 'University of California' and
      'California' can't both be kept.

    :param corefs: raw coreference chains, by chain id
    :param lang: language of the document

    :return: cleaned chains, each chain having its mentions in textual
        order.  Chains with no remaining mentions are dropped.
    """
    # a mention is identified by (chain id, index in chain.mentions)
    MentionKey = Tuple[int, int]

    candidates: List[MentionKey] = []
    for chain_id, chain in corefs.items():
        order = chain.mentions_in_textual_order()
        pronouns_nb = sum(
            1 for i in order if is_a_first_person_pronoun(chain.mentions[i].text, lang)
        )
        chain_candidates = [
            (chain_id, i)
            for i in order
            if pronouns_nb >= MIN_FIRST_PERSON_PRONOUNS
            or not is_a_first_person_pronoun(chain.mentions[i].text, lang)
        ]
        if (
            not chain.representative is None
            and not (chain_id, chain.representative) in chain_candidates
        ):
            chain_candidates.append((chain_id, chain.representative))
        candidates += chain_candidates

    def mention(key: MentionKey) -> CorefMention:
        return corefs[key[0]].mentions[key[1]]

    # sorted is stable: equal length mentions keep their discovery order
    candidates = sorted(candidates, key=lambda key: len(mention(key)))

    mask: Dict[int, Set[int]] = defaultdict(set)
    kept: Set[MentionKey] = set()
    for key in candidates:
        m = mention(key)
        occupied = mask[m.sentence_idx]
        if any(i in occupied for i in m.span):
            continue
        occupied.update(m.span)
        kept.add(key)

    cleaned_chains = []
    for chain_id, chain in corefs.items():
        mentions = []
        representative = None
        for i in chain.mentions_in_textual_order():
            if not (chain_id, i) in kept:
                continue
            if i == chain.representative:
                representative = len(mentions)
            mentions.append(chain.mentions[i])
        if len(mentions) > 0:
            cleaned_chains.append(CleanedChain(mentions, representative))

    return cleaned_chains
