"""Tokenizer for handpan layout strings.

Two notations are supported:

- simple:    ``D3 A3 Bb3 [C4] (F3)``: tokens separated by hyphens or spaces,
             the first token is the ding.
- handpaner: ``D/-A-Bb-C-D-(F)-[G]``: the ding before ``/``, then the notes
             part, scanned character by character so that ``(...)`` and
             ``[...]`` groups are never split.
"""

import re

from panlayout.layout_models import NoteRole

_GROUP_OPENERS = {"(": ")", "[": "]"}
_SEPARATORS = {"-", " "}


def clean_layout(layout: str) -> str:
    """Trim, drop one trailing underscore and collapse internal whitespace."""
    cleaned = layout.strip()
    if cleaned.endswith("_"):
        cleaned = cleaned[:-1]
    return re.sub(r"\s+", " ", cleaned).strip()


def split_root(cleaned: str) -> tuple[str, str] | None:
    """
    Split a handpaner layout into (root part, notes part) at the first '/'.

    Returns None when there is no '/', meaning the simple format applies.
    """
    root, slash, notes_part = cleaned.partition("/")
    if not slash:
        return None
    return root.strip(), notes_part.strip()


def tokenize_notes_part(notes_part: str) -> list[str]:
    """
    Scan the notes part of a handpaner layout into raw tokens.

    Outside a group, ``-``, space and the group delimiters flush the current
    token. Inside ``(...)`` or ``[...]`` everything up to the closing
    delimiter belongs to the group token, which is emitted with its brackets.
    """
    tokens: list[str] = []
    current = ""
    in_parens = False
    in_brackets = False

    def flush() -> None:
        nonlocal current
        if current.strip():
            tokens.append(current.strip())
        current = ""

    for ch in notes_part:
        if ch in _GROUP_OPENERS:
            flush()
            current = ch
            in_parens = ch == "("
            in_brackets = ch == "["
        elif ch in (")", "]"):
            current += ch
            flush()
            in_parens = in_brackets = False
        elif ch in _SEPARATORS and not (in_parens or in_brackets):
            flush()
        else:
            current += ch

    flush()
    return tokens


def tokenize_simple(layout: str) -> list[str]:
    """Split a simple-format layout on runs of hyphens and spaces."""
    return [token for token in re.split(r"[\s\-]+", layout) if token]


def classify_token(token: str) -> tuple[NoteRole, str]:
    """Return the role implied by a token's brackets and the unwrapped note text."""
    if token.startswith("(") and token.endswith(")"):
        return NoteRole.BOTTOM, token[1:-1].strip()
    if token.startswith("[") and token.endswith("]"):
        return NoteRole.MUTANT, token[1:-1].strip()
    return NoteRole.TONAL, token
