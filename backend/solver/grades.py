from __future__ import annotations

_PRE_PRIMARY = {
    "NURSERY": -2,
    "LKG": -1,
    "UKG": 0,
}

_ROMAN = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100}


def _roman_to_int(value: str) -> int:
    total = 0
    prev = 0
    for ch in reversed(value):
        cur = _ROMAN[ch]
        if cur < prev:
            total -= cur
        else:
            total += cur
            prev = cur
    return total


def grade_ordinal(grade: str) -> int:
    """Map a grade label ("7", "IX", "UKG") onto an orderable integer.

    Raises ValueError for labels that are not a grade.
    """

    g = (grade or "").strip().upper()
    if not g:
        raise ValueError("empty grade")
    if g in _PRE_PRIMARY:
        return _PRE_PRIMARY[g]
    if g.isdigit():
        return int(g)
    if all(ch in _ROMAN for ch in g):
        return _roman_to_int(g)
    raise ValueError(f"unrecognised grade: {grade!r}")
