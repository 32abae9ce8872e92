first_person_pronouns = {
    "eng": {"i", "me", "myself", "mine", "my", "we", "us", "ourself", "ourselves", "ours", "our"},
}


def is_a_first_person_pronoun(word: str, lang: str = "eng") -> bool:
    try:
        return word.lower() in first_person_pronouns[lang]
    except KeyError:
        raise ValueError(
            f"unsupported lang for is_a_first_person_pronoun: {lang} (supported langs: {list(first_person_pronouns.keys())})"
        )
