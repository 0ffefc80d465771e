"""Fuzzy text similarity between a CTA guess and an element label."""


def _normalize(text: str) -> str:
    return " ".join((text or "").lower().split())


def calculate_similarity(text1: str, text2: str) -> float:
    """Similarity in [0, 1].

    1.0 for an exact (case/whitespace-normalized) match, 0.8 when one text
    contains the other, otherwise the share of common words over the longer
    word list. Empty input or no shared words → 0.
    """
    t1 = _normalize(text1)
    t2 = _normalize(text2)

    if not t1 or not t2:
        return 0.0

    if t1 == t2:
        return 1.0

    if t1 in t2 or t2 in t1:
        return 0.8

    words1 = t1.split(" ")
    words2 = t2.split(" ")
    common_words = [word for word in words1 if word in words2]

    if not common_words:
        return 0.0
    return len(common_words) / max(len(words1), len(words2))


def best_similarity(text: str, search_texts) -> float:
    """Highest similarity of text against any of the search texts."""
    return max((calculate_similarity(text, search) for search in search_texts), default=0.0)
