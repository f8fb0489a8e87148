"""
Simplified Cologne phonetics (Koelner Phonetik) for German-language names.

Code table:
    a e i j o u y          -> 0   (only kept as the very first code)
    b                      -> 1
    p (not before h)       -> 1
    d t (before c s z)     -> 8,  otherwise 2
    f v w                  -> 3
    g k q                  -> 4
    c  initial, before a h k l o q r u x          -> 4, else 8
    c  after s z                                  -> 8
    c  before a h k o q u x                       -> 4, else 8
    x                      -> 48
    l                      -> 5
    m n                    -> 6
    r                      -> 7
    s z                    -> 8

Every other character (h, whitespace, punctuation, digits) has no code and is
skipped. A code equal to the tail of the result so far is collapsed.
"""

from __future__ import annotations

_SUBSTITUTIONS = (
    ("ä", "a"),
    ("ö", "o"),
    ("ü", "u"),
    ("ß", "ss"),
    ("ph", "f"),
)


def _char_code(s: str, i: int) -> str:
    c = s[i]
    nxt = s[i + 1] if i + 1 < len(s) else ""
    prev = s[i - 1] if i > 0 else ""

    if c in "aeijouy":
        return "0"
    if c == "b":
        return "1"
    if c == "p":
        return "3" if nxt == "h" else "1"
    if c in "dt":
        return "8" if nxt and nxt in "csz" else "2"
    if c in "fvw":
        return "3"
    if c in "gkq":
        return "4"
    if c == "c":
        if i == 0:
            return "4" if nxt and nxt in "ahkloqrux" else "8"
        if prev and prev in "sz":
            return "8"
        return "4" if nxt and nxt in "ahkoqux" else "8"
    if c == "x":
        return "48"
    if c == "l":
        return "5"
    if c in "mn":
        return "6"
    if c == "r":
        return "7"
    if c in "sz":
        return "8"
    return ""


def cologne_phonetics(name: str) -> str:
    """
    Encode ``name`` into a digit string, e.g. "Meyer" and "Maier" -> "67".
    """
    s = (name or "").lower()
    for src, dst in _SUBSTITUTIONS:
        s = s.replace(src, dst)

    res = ""
    for i in range(len(s)):
        code = _char_code(s, i)
        if not code:
            continue
        if res.endswith(code):
            continue
        if code == "0" and res:
            continue
        res += code
    return res


__all__ = ["cologne_phonetics"]
