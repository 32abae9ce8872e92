from corefanchor.pipeline.core import Document, TargetPair
from corefanchor.pipeline.timex import TimexAnnotator


def test_timex_values_become_antecedents():
    document = Document.from_tagged(["Obama/NNP/PERSON was/VBD/O born/VBN/O in/IN/O 1961/CD/DATE"])
    document.sentences[0].tokens[4].timex_value = "1961"
    document.sentences[0].tokens[0].antecedent = "Barack Obama"
    document.sentences[0].tokens[0].timex_value = "XXXX"

    out = TimexAnnotator()(document, TargetPair("Barack Obama"))

    assert out["timex_antecedents"] == {"1961"}

    tokens = document.sentences[0].tokens
    assert tokens[4].antecedent == "1961"
    assert tokens[0].antecedent == "Barack Obama"
    assert tokens[1].antecedent is None
