"""
Module: extractor.sources

Purpose:
    Read answer text from files. Plain text files are decoded as UTF-8;
    PDF answer sheets are read page by page with PyMuPDF text extraction.

Key Functions:
    - read_source_text(): File -> text
    - extract_from_file(): File -> AnswerSet

Dependencies:
    - fitz (PyMuPDF): PDF text extraction

Used By:
    - cli: extract / timeline / play commands
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

import fitz

from qcm_haptics.core.models import AnswerSet
from qcm_haptics.errors import SourceReadError

from .extractor import extract_answers

logger = logging.getLogger(__name__)

PDF_SUFFIXES = {".pdf"}


def read_pdf_text(path: Path) -> str:
    """
    Extract the text of every page of a PDF.

    Args:
        path: Path to a PDF file.

    Returns:
        Page texts joined with newlines, in page order.

    Raises:
        SourceReadError: If PyMuPDF cannot open or read the file.
    """
    pages: List[str] = []
    try:
        with fitz.open(path) as doc:
            for page_idx in range(doc.page_count):
                pages.append(doc[page_idx].get_text("text"))
            logger.debug(f"Read {doc.page_count} page(s) from {path.name}")
    except (RuntimeError, ValueError) as e:
        # fitz.FileDataError subclasses RuntimeError
        raise SourceReadError(f"Failed to read PDF {path}: {e}") from e
    return "\n".join(pages)


def read_source_text(path: Union[str, Path]) -> str:
    """
    Read answer text from a text or PDF file.

    Args:
        path: File to read. ``.pdf`` files go through PyMuPDF, anything
            else is read as UTF-8 with undecodable bytes replaced.

    Returns:
        File text.

    Raises:
        SourceReadError: If the file is missing, a directory, or unreadable.

    Example:
        >>> read_source_text(Path("answers.txt"))
        '1/c\\n2/b\\n'
    """
    path = Path(path)
    if not path.exists():
        raise SourceReadError(f"Answer source not found: {path}")
    if not path.is_file():
        raise SourceReadError(f"Answer source is not a file: {path}")

    if path.suffix.lower() in PDF_SUFFIXES:
        return read_pdf_text(path)

    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise SourceReadError(f"Failed to read {path}: {e}") from e


def extract_from_file(path: Union[str, Path]) -> AnswerSet:
    """Read a file and extract its answers."""
    text = read_source_text(path)
    answers = extract_answers(text)
    logger.info(f"Found {len(answers)} answer(s) in {Path(path).name}")
    return answers
