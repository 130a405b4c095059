"""
Tokenizer - Split text into comparable units for diffing
"""

from __future__ import annotations

import re
from typing import Callable

from models.diff import DiffOptions, Granularity

_WORD_PATTERN = re.compile(r"(\s+)")
# A blank line: newline, optional horizontal whitespace, newline, then any trailing whitespace
_SECTION_PATTERN = re.compile(r"(\n[ \t]*\n\s*)")


def tokenize(text: str, granularity: Granularity) -> list[str]:
    """Split text into tokens whose concatenation is exactly the input"""
    if not text:
        return []

    if granularity == Granularity.CHARACTER:
        return list(text)
    if granularity == Granularity.LINE:
        return text.splitlines(keepends=True)
    if granularity == Granularity.WORD:
        return [part for part in _WORD_PATTERN.split(text) if part]
    if granularity == Granularity.SECTION:
        return _split_sections(text)

    raise ValueError(f"Unknown granularity: {granularity}")


def _split_sections(text: str) -> list[str]:
    """Paragraphs with their trailing blank-line separator attached"""
    parts = _SECTION_PATTERN.split(text)
    sections = []
    # parts alternates paragraph, separator, paragraph, ...
    for i in range(0, len(parts), 2):
        paragraph = parts[i]
        separator = parts[i + 1] if i + 1 < len(parts) else ""
        section = paragraph + separator
        if section:
            sections.append(section)
    return sections


def separator_for(granularity: Granularity) -> str:
    """Joiner used when two tokens of this granularity are concatenated"""
    return {
        Granularity.CHARACTER: "",
        Granularity.WORD: " ",
        Granularity.LINE: "\n",
        Granularity.SECTION: "\n\n",
    }[granularity]


def comparison_key(granularity: Granularity, options: DiffOptions | None = None) -> Callable[[str], str]:
    """Build the key function used to decide token equality"""
    opts = options or DiffOptions()

    def key(token: str) -> str:
        result = token
        if granularity == Granularity.SECTION:
            result = result.strip()
        if opts.ignore_whitespace:
            result = " ".join(result.split())
        if opts.ignore_case:
            result = result.lower()
        return result

    return key
