from .pronouns import first_person_pronouns, is_a_first_person_pronoun
