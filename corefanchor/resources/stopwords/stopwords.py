#: stopwords that may be skipped, or matched by their lowercase
#: initial, when matching an acronym (as in "BoA" for "Bank of
#: America")
stopwords = {
    "eng": {
        "a",
        "an",
        "the",
        "of",
        "at",
        "on",
        "upon",
        "in",
        "to",
        "from",
        "out",
        "as",
        "so",
        "such",
        "or",
        "and",
        "those",
        "this",
        "these",
        "that",
        "for",
        ",",
        "is",
        "was",
        "am",
        "are",
        "'s",
        "been",
        "were",
    }
}


def is_a_stopword(word: str, lang: str = "eng") -> bool:
    try:
        return word.lower() in stopwords[lang]
    except KeyError:
        raise ValueError(
            f"unsupported lang for is_a_stopword: {lang} (supported langs: {list(stopwords.keys())})"
        )
