from corefanchor.pipeline.core import Document, Sentence, TargetPair
from corefanchor.pipeline.relevance import select_relevant_sentences


def annotated_document() -> Document:
    document = Document.from_tagged(
        [
            "Barack/NNP/PERSON Obama/NNP/PERSON was/VBD/O born/VBN/O in/IN/O Hawaii/NNP/LOCATION",
            "He/PRP/O was/VBD/O born/VBN/O in/IN/O 1961/CD/DATE",
            "Chicago/NNP/LOCATION is/VBZ/O large/JJ/O",
        ]
    )
    document.sentences[0].antecedents = {"Barack Obama", "Hawaii"}
    document.sentences[0].is_coreferent = False
    document.sentences[1].antecedents = {"Barack Obama"}
    document.sentences[1].is_coreferent = True
    return document


def test_sentences_mentioning_the_entity_are_relevant():
    document = annotated_document()
    assert select_relevant_sentences(document, TargetPair("Barack Obama")) == {0, 1}


def test_slot_value_must_be_mentioned():
    document = annotated_document()
    target = TargetPair("Barack Obama", slot_value="Hawaii")
    assert select_relevant_sentences(document, target) == {0}
    # a verbatim slot value is enough
    target = TargetPair("Barack Obama", slot_value="1961")
    assert select_relevant_sentences(document, target) == {1}


def test_coreferent_sentences_can_be_excluded():
    document = annotated_document()
    target = TargetPair("Barack Obama")
    assert select_relevant_sentences(
        document, target, allow_coreferent_sentences=False
    ) == {0}


def test_long_sentences_are_excluded():
    long_sentence = Sentence.from_tagged(
        "Barack/NNP/PERSON Obama/NNP/PERSON" + " word/NN/O" * 99
    )
    long_sentence.antecedents = {"Barack Obama"}
    document = Document([long_sentence])
    target = TargetPair("Barack Obama")
    assert len(long_sentence) == 101
    assert select_relevant_sentences(document, target) == set()
    assert select_relevant_sentences(document, target, max_sentence_tokens=101) == {0}
