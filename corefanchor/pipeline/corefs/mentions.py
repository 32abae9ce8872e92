from __future__ import annotations
from typing import List, Optional
from dataclasses import dataclass, field
from corefanchor.pipeline.core import Span


@dataclass(frozen=True)
class CorefMention:
    """A coreference mention, as produced by an upstream coreference
    resolver.  All indices are 0-based and relative to the mention
    sentence.
    """

    sentence_idx: int
    start_idx: int
    #: exclusive
    end_idx: int
    head_idx: int
    #: mention text, as given by the coreference resolver
    text: str

    @property
    def span(self) -> Span:
        return Span(self.start_idx, self.end_idx)

    def __len__(self) -> int:
        return self.end_idx - self.start_idx

    def position(self):
        """Sort key of the mention in the document"""
        return (self.sentence_idx, self.start_idx)


@dataclass
class CorefChain:
    """A set of mentions believed to co-refer by an upstream
    coreference resolver.
    """

    mentions: List[CorefMention] = field(default_factory=lambda: [])
    #: index of the representative mention in ``mentions``, if any
    representative: Optional[int] = None

    def mentions_in_textual_order(self) -> List[int]:
        """
        :return: indices of ``self.mentions``, sorted by position in
            the document.
        """
        return sorted(
            range(len(self.mentions)), key=lambda i: self.mentions[i].position()
        )


@dataclass
class CleanedChain:
    """A coreference chain after cleaning"""

    #: mentions, in textual order
    mentions: List[CorefMention]
    #: index of the representative mention in ``mentions``, if it
    #: survived cleaning
    representative: Optional[int] = None

    @property
    def representative_mention(self) -> Optional[CorefMention]:
        if self.representative is None:
            return None
        return self.mentions[self.representative]
