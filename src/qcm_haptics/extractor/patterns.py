"""
Module: extractor.patterns

Purpose:
    The five answer notation grammars. Each one is scanned independently
    over the whole text; overlapping matches are expected and are resolved
    later by deduplication, never by grammar precedence.

Key Classes:
    - NotationPattern: Named compiled grammar

Key Constants:
    - NOTATION_PATTERNS: Grammars in scan order

Dependencies:
    - re (std)

Used By:
    - extractor.extractor: Scans text with every pattern
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

# One or more answer letters, optionally repeated after commas ("b,c", "a, d, e").
LETTERS = r"[a-eA-E]+(?:\s*,\s*[a-eA-E]+)*"
DIGITS = r"[0-9]+"


@dataclass(frozen=True)
class NotationPattern:
    """
    A single answer notation grammar.

    Attributes:
        name: Short identifier used in debug logs.
        regex: Compiled pattern with groups ``number`` and ``letters``.
        example: A sample string the pattern matches.
    """
    name: str
    regex: re.Pattern
    example: str


def _compile(template: str) -> re.Pattern:
    return re.compile(template.format(digits=DIGITS, letters=LETTERS))


NOTATION_PATTERNS: Tuple[NotationPattern, ...] = (
    NotationPattern("slash", _compile(r"(?P<number>{digits})\s*/\s*(?P<letters>{letters})"), "12/c"),
    NotationPattern("period", _compile(r"(?P<number>{digits})\s*\.\s*(?P<letters>{letters})"), "3. a"),
    NotationPattern("hyphen", _compile(r"(?P<number>{digits})\s*-\s*(?P<letters>{letters})"), "1-b,c"),
    NotationPattern("colon", _compile(r"(?P<number>{digits})\s*:\s*(?P<letters>{letters})"), "5: a,b"),
    NotationPattern("q_prefix", _compile(r"[Qq](?P<number>{digits})\s*[:.]?\s*(?P<letters>{letters})"), "Q4: b"),
)
