"""
Shell-word utilities for hashbang.

Splits argument templates and shebang arguments the way a POSIX shell would
(quote-aware, whitespace only), and renders argument vectors back into a
readable command line for the debug log.
"""

from __future__ import annotations

import shlex

import bashlex

# Control and redirect operators bashlex emits as separate tokens.
# Templates are argument lists, so these only ever belong inside a word.
SHELL_OPERATORS = frozenset(
    {
        ";", ";;", ";&", ";;&", "&", "&&", "|", "||", "|&",
        "<", ">", ">>", "<<", "<<-", "<<<", "<&", ">&", "<>", ">|", "&>", "&>>",
        "(", ")",
    }
)


def _is_word(token: str) -> bool:
    return token not in SHELL_OPERATORS and bool(token.strip())


def split_words(text: str | None) -> list[str]:
    """Split a string into shell words, honouring quotes.

    Falls back to shlex when bashlex rejects the input or breaks it at an
    operator or newline, and to plain whitespace splitting when the quoting
    is unbalanced.
    """
    if not text or not text.strip():
        return []

    text = text.strip()
    try:
        words = list(bashlex.split(text))
        if all(_is_word(word) for word in words):
            return words
    except Exception:
        pass

    try:
        return shlex.split(text)
    except ValueError:
        return text.split()


def format_command(argv: list[str]) -> str:
    """Join an argument vector into a command line for logging."""
    return shlex.join(argv)
