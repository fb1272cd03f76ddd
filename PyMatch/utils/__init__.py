"""
Utility functions for PyMatch.

This module exposes the similarity registry over textdistance metrics and
small string preprocessing helpers for comparators.
"""

from __future__ import annotations

import re
import string
from typing import Optional


def lowercase(text: str) -> Optional[str]:
    """Lowercase a string; returns ``None`` for non‑string inputs."""
    return str(text).lower() if isinstance(text, str) else None


def remove_punctuation(text: str) -> Optional[str]:
    """Remove ASCII punctuation characters from a string; ``None`` for non-strings."""
    if not isinstance(text, str):
        return None
    return text.translate(str.maketrans("", "", string.punctuation))


def normalize_label(text: str) -> str:
    """Normalise an attribute label: split camelCase and separators, lowercase."""
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", str(text))
    text = re.sub(r"[_\-\.\s]+", " ", text)
    return text.strip().lower()


from .similarity_registry import SimilarityRegistry, get_similarity_function

__all__ = [
    "lowercase",
    "normalize_label",
    "remove_punctuation",
    "SimilarityRegistry",
    "get_similarity_function",
]
