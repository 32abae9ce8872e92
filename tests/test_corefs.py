from corefanchor.pipeline.core import Document, Span, TargetPair
from corefanchor.pipeline.corefs import (
    CleanedChain,
    CorefAntecedentAnnotator,
    CorefChain,
    CorefMention,
)


def obama_document() -> Document:
    return Document.from_tagged(
        [
            "Obama/NNP/PERSON visited/VBD/O Chicago/NNP/LOCATION ./.",
            "He/PRP/O was/VBD/O born/VBN/O in/IN/O Hawaii/NNP/LOCATION ./.",
        ]
    )


def obama_corefs():
    return {
        1: CorefChain(
            [CorefMention(0, 0, 1, 0, "Obama"), CorefMention(1, 0, 1, 0, "He")],
            representative=0,
        )
    }


def test_pronoun_gets_target_antecedent():
    document = obama_document()
    target = TargetPair("Barack Obama", "PERSON")
    CorefAntecedentAnnotator()(document, target, obama_corefs())

    he = document.sentences[1].tokens[0]
    assert he.antecedent == "Barack Obama"
    assert he.is_coreferent
    assert document.sentences[0].tokens[0].antecedent == "Barack Obama"
    assert document.sentences[1].antecedents == {"Barack Obama"}
    assert document.sentences[1].is_coreferent
    assert document.canonical_entity_span == (0, Span(0, 1))


def test_sentence_with_verbatim_entity_is_not_coreferent():
    document = Document.from_tagged(
        [
            "Barack/NNP/PERSON Obama/NNP/PERSON visited/VBD/O Chicago/NNP/LOCATION",
            "He/PRP/O was/VBD/O born/VBN/O in/IN/O Hawaii/NNP/LOCATION",
        ]
    )
    corefs = {
        0: CorefChain(
            [CorefMention(0, 0, 2, 1, "Barack Obama"), CorefMention(1, 0, 1, 0, "He")],
            representative=0,
        )
    }
    CorefAntecedentAnnotator()(document, TargetPair("Barack Obama"), corefs)

    assert document.sentences[0].is_coreferent is False
    assert document.sentences[1].is_coreferent is True
    assert document.sentences[0].tokens[0].is_coreferent is False
    assert document.sentences[1].tokens[0].is_coreferent is True


def test_chains_without_named_entity_are_skipped():
    document = Document.from_tagged(["the/DT/O firm/NN/O said/VBD/O it/PRP/O failed/VBD/O"])
    corefs = {
        0: CorefChain(
            [CorefMention(0, 0, 2, 1, "the firm"), CorefMention(0, 3, 4, 3, "it")]
        )
    }
    CorefAntecedentAnnotator()(document, TargetPair("Apple"), corefs)
    assert all(token.antecedent is None for token in document.sentences[0].tokens)
    assert document.sentences[0].antecedents == set()


def test_target_antecedent_has_priority():
    document = Document.from_tagged(["Obama/NNP/PERSON spoke/VBD/O"])
    target = TargetPair("Barack Obama")
    annotator = CorefAntecedentAnnotator()
    mention = CorefMention(0, 0, 1, 0, "Obama")

    annotator.propagate_antecedent(document, target, CleanedChain([mention]), "Barack Obama")
    annotator.propagate_antecedent(document, target, CleanedChain([mention]), "Obama")

    assert document.sentences[0].tokens[0].antecedent == "Barack Obama"
    assert document.sentences[0].antecedents == {"Barack Obama", "Obama"}


def test_target_antecedent_skips_non_nouns():
    document = Document.from_tagged(
        ["the/DT/O president/NN/O spoke/VBD/O"]
    )
    target = TargetPair("Barack Obama")
    mention = CorefMention(0, 0, 2, 1, "the president")
    CorefAntecedentAnnotator().propagate_antecedent(
        document, target, CleanedChain([mention]), "Barack Obama"
    )
    tokens = document.sentences[0].tokens
    assert tokens[0].antecedent is None
    assert tokens[1].antecedent == "Barack Obama"


def test_canonical_span_is_written_once():
    document = obama_document()
    target = TargetPair("Barack Obama")
    document.canonical_entity_span = (1, Span(4, 5))
    CorefAntecedentAnnotator()(document, target, obama_corefs())
    assert document.canonical_entity_span == (1, Span(4, 5))


def test_missing_corefs_is_recoverable():
    document = obama_document()
    out = CorefAntecedentAnnotator()(document, TargetPair("Barack Obama"), None)
    assert out["document"] is document
    assert out["coref_antecedents"] == set()
    assert document.all_antecedents() == set()


def test_malformed_corefs_do_not_raise():
    document = obama_document()
    corefs = {0: CorefChain([CorefMention(5, 0, 1, 0, "Obama")])}
    out = CorefAntecedentAnnotator()(document, TargetPair("Barack Obama"), corefs)
    assert out["document"] is document
    assert out["coref_antecedents"] == set()
