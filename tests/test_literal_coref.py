import pytest
from corefanchor.pipeline.core import Document, Span, TargetPair
from corefanchor.pipeline.literal_coref import (
    LiteralCorefAnnotator,
    approximate_match,
    is_acronym,
)


@pytest.mark.parametrize(
    "target_token,token",
    [
        ("Group", "group"),
        ("Supplier", "Suppliers"),
        ("Business", "Businesses"),
        ("Corp.", "Corp"),
        ("Inc", "Inc."),
    ],
)
def test_approximate_match(target_token: str, token: str):
    assert approximate_match(target_token, token)


@pytest.mark.parametrize(
    "target_token,token",
    [
        ("Apple", "Orange"),
        ("Corp", "Corporation"),
        ("Corp.", "Corporation"),
        ("Inc.", "Incubator"),
        ("St.", "Steve"),
        (".", "anything"),
    ],
)
def test_approximate_mismatch(target_token: str, token: str):
    assert not approximate_match(target_token, token)


def test_is_acronym():
    assert is_acronym("IBM", ["International", "Business", "Machines"])
    assert is_acronym("BoA", ["Bank", "of", "America"])
    assert is_acronym("BA", ["Bank", "of", "America"])
    assert not is_acronym("IBX", ["International", "Business", "Machines"])
    assert not is_acronym("IB", ["International", "Business", "Machines"])


def test_acronym_is_annotated():
    document = Document.from_tagged(["IBM/NN/O reported/VBD/O earnings/NNS/O ./."])
    target = TargetPair("International Business Machines", "ORGANIZATION")
    LiteralCorefAnnotator()(document, target)

    ibm = document.sentences[0].tokens[0]
    assert ibm.antecedent == "International Business Machines"
    assert ibm.pos == "NNP"
    assert ibm.ner == "ORGANIZATION"
    assert ibm.is_coreferent is False
    assert document.sentences[0].alternate_names == {
        "International Business Machines": {Span(0, 1)}
    }
    assert document.canonical_entity_span == (0, Span(0, 1))
    assert all(t.antecedent is None for t in document.sentences[0].tokens[1:])


def test_literal_mention_with_alternate_name():
    document = Document.from_tagged(
        [
            "International/NNP/ORGANIZATION Business/NNP/ORGANIZATION "
            "Machines/NNP/ORGANIZATION Corp./NNP/ORGANIZATION said/VBD/O"
        ]
    )
    target = TargetPair("International Business Machines", "ORGANIZATION")
    LiteralCorefAnnotator()(document, target)

    sentence = document.sentences[0]
    assert [t.antecedent for t in sentence.tokens[:4]] == [
        "International Business Machines"
    ] * 4
    assert sentence.tokens[4].antecedent is None
    assert sentence.alternate_names == {"International Business Machines": {Span(0, 4)}}
    assert sentence.antecedents == {"International Business Machines"}
    assert sentence.is_coreferent is False
    assert document.canonical_entity_span == (0, Span(0, 3))


def test_person_names_are_not_expanded():
    document = Document.from_tagged(
        ["President/NNP/PERSON Barack/NNP/PERSON Obama/NNP/PERSON spoke/VBD/O"]
    )
    target = TargetPair("Barack Obama", "PERSON")
    LiteralCorefAnnotator()(document, target)
    sentence = document.sentences[0]
    assert sentence.tokens[0].antecedent is None
    assert sentence.alternate_names == {}


def test_slot_value_is_annotated():
    document = Document.from_tagged(
        ["Obama/NNP/PERSON was/VBD/O born/VBN/O in/IN/O Hawaii/NNP/LOCATION"]
    )
    target = TargetPair("Barack Obama", "PERSON", "Hawaii", "LOCATION")
    LiteralCorefAnnotator()(document, target)
    assert document.sentences[0].tokens[4].antecedent == "Hawaii"
    assert document.canonical_slot_span == (0, Span(4, 5))
    assert document.canonical_entity_span is None


def test_literal_annotation_is_idempotent():
    document = Document.from_tagged(
        [
            "International/NNP/ORGANIZATION Business/NNP/ORGANIZATION "
            "Machines/NNP/ORGANIZATION Corp./NNP/ORGANIZATION said/VBD/O",
            "IBM/NNP/ORGANIZATION shares/NNS/O rose/VBD/O",
        ]
    )
    target = TargetPair("International Business Machines", "ORGANIZATION")
    annotator = LiteralCorefAnnotator()

    annotator(document, target)
    antecedents = [[t.antecedent for t in s.tokens] for s in document.sentences]
    canonical_span = document.canonical_entity_span

    annotator(document, target)
    assert [[t.antecedent for t in s.tokens] for s in document.sentences] == antecedents
    assert document.canonical_entity_span == canonical_span


def test_canonical_span_is_written_once():
    document = Document.from_tagged(
        ["Apple/NNP/ORGANIZATION rose/VBD/O", "Apple/NNP/ORGANIZATION fell/VBD/O"]
    )
    target = TargetPair("Apple")
    LiteralCorefAnnotator()(document, target)
    assert document.canonical_entity_span == (0, Span(0, 1))
    assert document.sentences[1].tokens[0].antecedent == "Apple"


def test_abbreviation_prefix_is_not_a_mention():
    document = Document.from_tagged(
        ["Apple/NNP/ORGANIZATION Incubator/NNP/ORGANIZATION opened/VBD/O"]
    )
    LiteralCorefAnnotator()(document, TargetPair("Apple Inc.", "ORGANIZATION"))
    assert [t.antecedent for t in document.sentences[0].tokens] == [None] * 3
    assert document.canonical_entity_span is None
