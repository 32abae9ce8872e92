from .mentions import CorefMention, CorefChain, CleanedChain
from .cleaning import clean_coref_chains
from .representative import (
    ANTECEDENT_TIERS,
    ResolutionContext,
    choose_antecedent,
    majority_ner,
)
from .corefs import CorefAntecedentAnnotator
