from typing import Iterable, List, Optional


def normalise(text: Optional[str]) -> str:
    return (text or "").lower()


def contains_any(text: str, terms: Iterable[str]) -> List[str]:
    """Terms found in text, case-insensitively, in the order given.

    Repeated occurrences in the text count once; a term listed twice is
    reported twice.
    """
    t = normalise(text)
    return [term for term in terms if term.lower() in t]
