# sanitize.py
# -*- coding: utf-8 -*-

"""
Quality gate for candidate field values pulled out of a detail page.
"""

import re
from typing import Optional

from companywall.config import CANDIDATE_MAX_LENGTH
from companywall.constants import LABEL_WORDS, NOISE_PATTERNS

_LABEL_WORD_PATTERNS = [re.compile(r"\b" + re.escape(word) + r"\b", re.I) for word in LABEL_WORDS]


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split()) if text else ""


def count_label_words(text: str) -> int:
    """Number of label word occurrences in text (repeats count separately)."""
    return sum(len(pattern.findall(text)) for pattern in _LABEL_WORD_PATTERNS)


def sanitize_candidate(text: Optional[str], max_length: int = CANDIDATE_MAX_LENGTH) -> str:
    """
    Return the cleaned candidate, or "" when it must be rejected.

    A candidate is rejected when it is empty, longer than max_length as
    received, matches a noise pattern (cookie banners, login prompts, script
    residue) or carries more than one label word. Text taken from the DOM is
    whitespace-collapsed by the caller before it gets here.
    """
    if not text:
        return ""
    if len(text) > max_length:
        return ""

    cleaned = collapse_whitespace(text).strip(" :-–|")
    if not cleaned:
        return ""
    if any(pattern.search(cleaned) for pattern in NOISE_PATTERNS):
        return ""
    if count_label_words(cleaned) > 1:
        return ""
    return cleaned
