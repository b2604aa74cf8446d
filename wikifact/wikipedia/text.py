"""
Cleanup for plain-text extracts returned by the query API.

``explaintext`` extracts still carry residue from math markup
(``{\\displaystyle ...}`` and friends) and odd spacing around it.
"""

from __future__ import annotations

import re

# Applied in order: markup removal first, spacing fixes last.
CLEANUP_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\{\\displaystyle[^}]*\}"), ""),  # LaTeX displaystyle
    (re.compile(r"\{\\[a-z]+[^}]*\}"), ""),  # Other LaTeX commands
    (re.compile(r"\\[a-zA-Z]+"), ""),  # Backslash commands
    (re.compile(r"\{\}|\{|\}"), ""),  # Curly braces
    (re.compile(r"\s{2,}"), " "),  # Multiple spaces
    (re.compile(r"\s+([.,;:])"), r"\1"),  # Space before punctuation
    (re.compile("[\u2060\u200B\u00A0]+"), " "),  # Unicode spaces
]


def _clean_once(text: str) -> str:
    for pattern, replacement in CLEANUP_PATTERNS:
        text = pattern.sub(replacement, text)
    return text.strip()


def normalize(raw: str) -> str:
    """
    Strip markup artifacts from an article extract.

    The pattern pass is repeated until nothing changes, so
    ``normalize(normalize(s)) == normalize(s)`` for any input.
    """
    text = raw
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
