"""
Module: extractor

Purpose:
    Answer notation parsing. Turns free-form text (or a text/PDF file) into
    a sorted, duplicate-free AnswerSet.

Key Functions:
    - extract_answers(): Main entry point for text
    - extract_from_file(): Entry point for files

Key Classes:
    - Extractor: Stateless extractor with configurable grammars

Dependencies:
    - fitz (PyMuPDF): PDF text extraction (sources only)
"""

from .extractor import (
    Extractor,
    contains_answers,
    count_answers,
    expand_payload,
    extract_answers,
    format_answers_for_display,
)
from .patterns import NOTATION_PATTERNS, NotationPattern
from .sources import extract_from_file, read_source_text

__all__ = [
    "Extractor",
    "extract_answers",
    "expand_payload",
    "contains_answers",
    "count_answers",
    "format_answers_for_display",
    "NOTATION_PATTERNS",
    "NotationPattern",
    "extract_from_file",
    "read_source_text",
]
