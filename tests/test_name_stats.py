from corefanchor.pipeline.core import Document
from corefanchor.pipeline.name_stats import NameStatistics


def test_people_are_indexed_by_first_and_last_name():
    document = Document.from_tagged(
        [
            "Barack/NNP/PERSON Obama/NNP/PERSON met/VBD/O Michelle/NNP/PERSON ./.",
            "Obama/NNP/PERSON works/VBZ/O for/IN/O IBM/NNP/ORGANIZATION ./.",
        ]
    )
    stats = NameStatistics(document, "Barack Obama")
    assert stats.entities_by_type["PERSON"] == {"Barack Obama", "Michelle", "Obama"}
    assert stats.entities_by_type["ORGANIZATION"] == {"IBM"}
    # single token names are not indexed
    assert dict(stats.people_by_first_name) == {"Barack": {"Barack Obama"}}
    assert dict(stats.people_by_last_name) == {"Obama": {"Barack Obama"}}


def test_unknown_fragment_matches_target():
    document = Document.from_tagged(["Obama/NNP/PERSON spoke/VBD/O ./."])
    stats = NameStatistics(document, "Barack Obama")
    assert stats.partial_name_matches_entity("Barack Obama", "Obama")
    assert stats.partial_name_matches_entity("Barack Obama", "Barack")
    assert not stats.partial_name_matches_entity("Barack Obama", "Michelle")


def test_shared_fragment_does_not_match_target():
    document = Document.from_tagged(
        [
            "Barack/NNP/PERSON Obama/NNP/PERSON spoke/VBD/O ./.",
            "Michelle/NNP/PERSON Obama/NNP/PERSON listened/VBD/O ./.",
        ]
    )
    stats = NameStatistics(document, "Barack Obama")
    assert stats.people_by_last_name["Obama"] == {"Barack Obama", "Michelle Obama"}
    assert not stats.partial_name_matches_entity("Barack Obama", "Obama")
