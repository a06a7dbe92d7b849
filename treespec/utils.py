# treespec/utils.py
# Naming helpers shared by the semantic analyzer, the translator and the combiner.
from __future__ import annotations


def _is_ident_continue(c: str) -> bool:
    # XID_Continue: anything that may follow the first character of an identifier.
    return ("a" + c).isidentifier()


def sanitize(identifier: str) -> str:
    """Turn free text into something usable inside an identifier.

    Hyphens become underscores; characters that cannot appear in an identifier
    are dropped, except spaces, which callers use as word boundaries.

    >>> sanitize("my-variable@123")
    'my_variable123'
    """
    s = identifier.replace("-", "_")
    return "".join(c for c in s if c == " " or _is_ident_continue(c))


def upper_first_letter(s: str) -> str:
    return s[:1].upper() + s[1:]


def lower_first_letter(s: str) -> str:
    return s[:1].lower() + s[1:]


def to_pascal_case(sentence: str) -> str:
    """'when only owner' -> 'WhenOnlyOwner'"""
    return "".join(upper_first_letter(w) for w in sentence.split())


def to_modifier_name(title: str) -> str:
    """Name of the modifier synthesized for a condition title."""
    return lower_first_letter(to_pascal_case(sanitize(title)))


def pluralize(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def offset_to_line(text: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return text.count("\n", 0, offset) + 1


def squash_blank_lines(text: str) -> str:
    """Blank out whitespace-only lines and collapse runs of them to one."""
    lines = ["" if not ln.strip() else ln for ln in text.split("\n")]
    out = []
    for ln in lines:
        if ln == "" and out and out[-1] == "":
            continue
        out.append(ln)
    return "\n".join(out)
