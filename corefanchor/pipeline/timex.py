from typing import Any, Dict, Optional, Set, Literal, Union
from corefanchor.pipeline.core import Document, PipelineStep, TargetPair


class TimexAnnotator(PipelineStep):
    """Set the normalized value of temporal expressions (such as
    '2008-11-04' for 'November 4, 2008') as the antecedent of their
    tokens.  Tokens already referring to a target are left untouched.
    """

    def __call__(
        self, document: Document, target: Optional[TargetPair] = None, **kwargs
    ) -> Dict[str, Any]:
        antecedents = set()
        for sentence in document.sentences:
            for token in sentence.tokens:
                if token.timex_value is None:
                    continue
                if not target is None and target.is_target(token.antecedent):
                    continue
                token.antecedent = token.timex_value
                antecedents.add(token.timex_value)
        return {"document": document, "timex_antecedents": antecedents}

    def supported_langs(self) -> Union[Set[str], Literal["any"]]:
        return "any"

    def needs(self) -> Set[str]:
        return set()

    def optional_needs(self) -> Set[str]:
        return {"target"}

    def production(self) -> Set[str]:
        return {"timex_antecedents"}
