from __future__ import annotations
from typing import Dict, Set
from collections import defaultdict
import logging
from corefanchor.ner_utils import PERSON_TAG, ner_entities
from corefanchor.pipeline.core import Document


logger = logging.getLogger(__name__)


class NameStatistics:
    """Named entities statistics of a document, used to decide if a
    partial name (such as 'Obama') can be safely folded onto a full
    name (such as 'Barack Obama').

    :ivar entities_by_type: for each NER tag, the set of entities
        found in the document.
    :ivar people_by_first_name: maps a first name to the set of full
        names of persons (of at least two tokens) having it.
    :ivar people_by_last_name: same as ``people_by_first_name``, for
        last names.
    """

    def __init__(self, document: Document, query: str) -> None:
        """
        :param document: the document to compute statistics for
        :param query: the name these statistics are computed for.
            Only used for logging.
        """
        logger.debug(f"creating name statistics for {query}")

        self.entities_by_type: Dict[str, Set[str]] = defaultdict(set)
        for sentence in document.sentences:
            entities = ner_entities(
                [token.text for token in sentence.tokens],
                [token.ner for token in sentence.tokens],
            )
            for entity in entities:
                self.entities_by_type[entity.tag].add(" ".join(entity.tokens))

        self.people_by_first_name: Dict[str, Set[str]] = defaultdict(set)
        self.people_by_last_name: Dict[str, Set[str]] = defaultdict(set)
        for person in self.entities_by_type.get(PERSON_TAG, set()):
            name_parts = person.split()
            if len(name_parts) < 2:
                continue
            self.people_by_first_name[name_parts[0]].add(person)
            self.people_by_last_name[name_parts[-1]].add(person)

    def partial_name_matches_entity(self, target_name: str, name: str) -> bool:
        """Check if ``name`` can be safely clustered with
        ``target_name``, which is the case when it is the beginning
        (or the end) of ``target_name`` and no other person of the
        document has it as a first name (or as a last name).

        :param target_name: the full name of the target
        :param name: the partial name to check
        """
        by_first_name = self.people_by_first_name.get(name)
        if (by_first_name is None and target_name.startswith(name)) or (
            not by_first_name is None
            and len(by_first_name) == 1
            and name in by_first_name
        ):
            return True

        by_last_name = self.people_by_last_name.get(name)
        if (by_last_name is None and target_name.endswith(name)) or (
            not by_last_name is None
            and len(by_last_name) == 1
            and name in by_last_name
        ):
            return True

        return False
