"""
Registry of textdistance similarity functions used by PyMatch comparators.

All functions return a normalised similarity in [0, 1].
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Union

import textdistance


class SimilarityRegistry:
    """Registry for textdistance similarity metrics.

    Provides a single place to look up and validate similarity functions by
    name, grouped by their characteristics.
    """

    # Edit-based algorithms - good for typos and character-level variations
    EDIT_BASED = {
        "levenshtein": textdistance.levenshtein.normalized_similarity,
        "damerau_levenshtein": textdistance.damerau_levenshtein.normalized_similarity,
        "jaro_winkler": textdistance.jaro_winkler.normalized_similarity,
        "jaro": textdistance.jaro.normalized_similarity,
        "needleman_wunsch": textdistance.needleman_wunsch.normalized_similarity,
        "smith_waterman": textdistance.smith_waterman.normalized_similarity,
    }

    # Token-based algorithms - good for multi-word strings and sets
    TOKEN_BASED = {
        "jaccard": textdistance.jaccard.normalized_similarity,
        "sorensen_dice": textdistance.sorensen.normalized_similarity,
        "overlap": textdistance.overlap.normalized_similarity,
        "cosine": textdistance.cosine.normalized_similarity,
        "monge_elkan": textdistance.monge_elkan.normalized_similarity,
    }

    # Sequence-based algorithms - good for substring matching
    SEQUENCE_BASED = {
        "lcsseq": textdistance.lcsseq.normalized_similarity,
        "lcsstr": textdistance.lcsstr.normalized_similarity,
        "ratcliff_obershelp": textdistance.ratcliff_obershelp.normalized_similarity,
    }

    # Simple algorithms - good for specific patterns
    SIMPLE = {
        "prefix": textdistance.prefix.normalized_similarity,
        "postfix": textdistance.postfix.normalized_similarity,
        "identity": textdistance.identity.normalized_similarity,
    }

    ALL_ALGORITHMS = {
        **EDIT_BASED,
        **TOKEN_BASED,
        **SEQUENCE_BASED,
        **SIMPLE,
    }

    CATEGORIES = {
        "edit": EDIT_BASED,
        "token": TOKEN_BASED,
        "sequence": SEQUENCE_BASED,
        "simple": SIMPLE,
        "all": ALL_ALGORITHMS,
    }

    # Functions that benefit from tokenization (token-based algorithms)
    TOKENIZABLE_FUNCTIONS = set(TOKEN_BASED)

    TOKENIZATION_STRATEGIES = {
        "char": lambda text: text,  # Character-level (no tokenization)
        "word": lambda text: text.split() if isinstance(text, str) else text,
        "ngram_2": lambda text: [text[i:i+2] for i in range(len(text)-1)] if isinstance(text, str) else text,
        "ngram_3": lambda text: [text[i:i+3] for i in range(len(text)-2)] if isinstance(text, str) else text,
    }

    @classmethod
    def get_function(cls, name: str, tokenization: Union[str, Callable] = "char") -> Callable:
        """Get a similarity function by name with optional tokenization.

        Parameters
        ----------
        name : str
            Name of the similarity function.
        tokenization : str or callable, optional
            "char" (default, no tokenization), "word", "ngram_2", "ngram_3"
            or a custom tokenizer function.

        Returns
        -------
        Callable
            Function ``(str, str) -> float``.

        Raises
        ------
        ValueError
            If the function name or tokenization strategy is not recognized.
        """
        if name not in cls.ALL_ALGORITHMS:
            raise ValueError(
                f"Unknown similarity function: {name}. "
                f"Available functions: {list(cls.ALL_ALGORITHMS.keys())}"
            )

        base_func = cls.ALL_ALGORITHMS[name]

        if tokenization != "char" and name in cls.TOKENIZABLE_FUNCTIONS:
            return cls._wrap_with_tokenization(base_func, tokenization)
        elif tokenization != "char":
            logging.warning(
                f"Tokenization '{tokenization}' not applicable to function '{name}' "
                f"(only supported for: {sorted(cls.TOKENIZABLE_FUNCTIONS)}). "
                "Using character-level processing."
            )

        return base_func

    @classmethod
    def _wrap_with_tokenization(cls, base_func: Callable, tokenization: Union[str, Callable]) -> Callable:
        if callable(tokenization):
            tokenizer = tokenization
        elif tokenization in cls.TOKENIZATION_STRATEGIES:
            tokenizer = cls.TOKENIZATION_STRATEGIES[tokenization]
        else:
            raise ValueError(
                f"Unknown tokenization strategy: {tokenization}. "
                f"Available strategies: {list(cls.TOKENIZATION_STRATEGIES.keys())} "
                "or provide a callable tokenizer."
            )

        def tokenized_similarity(s1: str, s2: str) -> float:
            if not s1 or not s2:
                return 0.0 if s1 != s2 else 1.0

            tokens1 = tokenizer(s1)
            tokens2 = tokenizer(s2)

            if not tokens1 and not tokens2:
                return 1.0
            elif not tokens1 or not tokens2:
                return 0.0

            return float(base_func(tokens1, tokens2))

        return tokenized_similarity

    @classmethod
    def list_available_functions(cls, category: Optional[str] = None) -> List[str]:
        """List similarity function names, optionally restricted to a category."""
        if category is None:
            return sorted(cls.ALL_ALGORITHMS.keys())
        if category not in cls.CATEGORIES:
            raise ValueError(
                f"Unknown category: {category}. "
                f"Available categories: {list(cls.CATEGORIES.keys())}"
            )
        return sorted(cls.CATEGORIES[category].keys())

    @classmethod
    def is_tokenizable(cls, function_name: str) -> bool:
        return function_name in cls.TOKENIZABLE_FUNCTIONS


def get_similarity_function(name: str, tokenization: Union[str, Callable] = "char") -> Callable:
    """Convenience wrapper around :meth:`SimilarityRegistry.get_function`."""
    return SimilarityRegistry.get_function(name, tokenization)


__all__ = ["SimilarityRegistry", "get_similarity_function"]
