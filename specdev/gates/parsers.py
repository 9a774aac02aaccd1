from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from specdev.config import DEFAULT_MIN_WORDS
from specdev.errors import OutputTooShort

_OPENING_FENCE = re.compile(r"^\s*(`{3,}|~{3,})[\w.+-]*\s*$")


@dataclass
class NormalizedOutput:
    text: str
    word_count: int
    line_count: int
    stripped_fence: bool = False
    warnings: List[OutputTooShort] = field(default_factory=list)


def _non_empty_bounds(lines: List[str]) -> Optional[Tuple[int, int]]:
    indexes = [index for index, line in enumerate(lines) if line.strip()]
    if len(indexes) < 2:
        return None
    return indexes[0], indexes[-1]


def _fence_pair(lines: List[str]) -> Optional[Tuple[int, int]]:
    bounds = _non_empty_bounds(lines)
    if bounds is None:
        return None
    first, last = bounds
    opening = _OPENING_FENCE.match(lines[first])
    if not opening:
        return None
    if lines[last].strip() != opening.group(1):
        return None
    return first, last


def strip_code_fence(text: str) -> Tuple[str, bool]:
    lines = text.splitlines(keepends=True)
    pair = _fence_pair(lines)
    if pair is None:
        return text, False
    first, last = pair
    inner = lines[first + 1 : last]
    # A doubly fenced body is left alone so that stripping stays idempotent.
    if _fence_pair(inner) is not None:
        return text, False
    return "".join(inner), True


def count_words(text: str) -> int:
    return len(text.split())


def count_lines(text: str) -> int:
    return len(text.splitlines())


def normalize(raw_text: str, min_words: int = DEFAULT_MIN_WORDS) -> NormalizedOutput:
    text, stripped = strip_code_fence(raw_text)
    words = count_words(text)
    result = NormalizedOutput(
        text=text,
        word_count=words,
        line_count=count_lines(text),
        stripped_fence=stripped,
    )
    if words < min_words:
        result.warnings.append(OutputTooShort(words, min_words))
    return result
