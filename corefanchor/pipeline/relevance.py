from typing import Any, Dict, Set, Literal, Union
from corefanchor.pipeline.core import Document, PipelineStep, TargetPair


def select_relevant_sentences(
    document: Document,
    target: TargetPair,
    max_sentence_tokens: int = 100,
    allow_coreferent_sentences: bool = True,
) -> Set[int]:
    """Select sentences usable for relation extraction from an
    annotated document.  A sentence is relevant if:

    - it has at most ``max_sentence_tokens`` tokens
    - the entity is one of its antecedents
    - the slot value (if any) is one of its antecedents, or appears
      verbatim in it
    - it mentions the entity verbatim, unless
      ``allow_coreferent_sentences`` is ``True``

    :return: indices of relevant sentences
    """
    relevant_sentences = set()
    for sentence_i, sentence in enumerate(document.sentences):
        if len(sentence) > max_sentence_tokens:
            continue
        if not target.entity in sentence.antecedents:
            continue
        if not target.slot_value is None and not (
            target.slot_value in sentence.antecedents
            or target.slot_value in sentence.text  # type: ignore
        ):
            continue
        if not allow_coreferent_sentences and not sentence.is_coreferent is False:
            continue
        relevant_sentences.add(sentence_i)
    return relevant_sentences


class RelevantSentencesSelector(PipelineStep):
    """Select relevant sentences, once all annotations are done.  See
    :func:`select_relevant_sentences`.
    """

    def __init__(
        self, max_sentence_tokens: int = 100, allow_coreferent_sentences: bool = True
    ) -> None:
        """
        :param max_sentence_tokens: maximum number of tokens of a
            relevant sentence.  Longer sentences are never relevant.
        :param allow_coreferent_sentences: if ``False``, sentences
            that only mention the entity through coreference are not
            relevant.
        """
        self.max_sentence_tokens = max_sentence_tokens
        self.allow_coreferent_sentences = allow_coreferent_sentences
        super().__init__()

    def __call__(
        self, document: Document, target: TargetPair, **kwargs
    ) -> Dict[str, Any]:
        return {
            "relevant_sentences": select_relevant_sentences(
                document,
                target,
                self.max_sentence_tokens,
                self.allow_coreferent_sentences,
            )
        }

    def supported_langs(self) -> Union[Set[str], Literal["any"]]:
        return "any"

    def needs(self) -> Set[str]:
        return {"target", "literal_antecedents"}

    def optional_needs(self) -> Set[str]:
        return {"coref_antecedents", "timex_antecedents"}

    def production(self) -> Set[str]:
        return {"relevant_sentences"}
