"""Text normalisation shared by the knowledge stores."""

import re

_WORD_RE = re.compile(r"\w+", re.UNICODE)

# Inflectional endings stripped before comparing words, longest first.
_ENDINGS = tuple(sorted(
    (
        "ами", "ями", "ого", "его", "ому", "ему", "ыми", "ими", "ой", "ей", "ом", "ем",
        "ам", "ям", "ах", "ях", "ов", "ев", "ых", "их", "ым", "им", "ую", "юю", "ая",
        "яя", "ое", "ее", "ий", "ый", "ию", "ия", "ии", "а", "я", "ы", "и", "е", "у", "ю", "о",
    ),
    key=len,
    reverse=True,
))
MAX_STEM_LENGTH = 6

STOP_WORDS = frozenset({
    "как", "что", "где", "когда", "какой", "какая", "какие", "куда", "мне", "мой",
    "моя", "мои", "вас", "вам", "нас", "нам", "для", "это", "или", "его", "она",
    "они", "так", "там", "тут", "уже", "еще", "можно", "нужно", "хочу",
    "подскажите", "пожалуйста", "добрый", "день", "здравствуйте",
})


def normalize(text: str) -> str:
    return text.lower().replace("ё", "е")


def stem(word: str) -> str:
    """Crude Russian stem: drop one inflectional ending, cap the length."""
    for ending in _ENDINGS:
        if word.endswith(ending) and len(word) - len(ending) >= 3:
            word = word[: -len(ending)]
            break
    return word[:MAX_STEM_LENGTH]


def stems(text: str) -> set[str]:
    """Significant word stems of a text."""
    return {
        stem(word)
        for word in _WORD_RE.findall(normalize(text))
        if len(word) >= 3 and word not in STOP_WORDS
    }


def overlap_score(query: str, candidate: str) -> float:
    """Share of the query's stems found in the candidate."""
    query_stems = stems(query)
    if not query_stems:
        return 0.0
    return len(query_stems & stems(candidate)) / len(query_stems)
