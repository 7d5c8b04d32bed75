"""String normalization and tokenization for device name comparison."""

from __future__ import annotations

import re

_QUOTE_TABLE = str.maketrans(
    {
        "‘": "'",
        "’": "'",
        "“": '"',
        "”": '"',
    }
)
_TOKEN_SPLIT_RE = re.compile(r"[\W_]+")


def normalize(value: str) -> str:
    """Replace typographic single and double quotes with their ASCII forms."""
    return value.translate(_QUOTE_TABLE)


def tokenize(value: str) -> set[str]:
    """Split a name into its set of lowercase alphanumeric tokens.

    >>> sorted(tokenize("Someone’s AirPods Max"))
    ['airpods', 'max', 's', 'someone']
    """
    lowered = normalize(value).lower()
    return {token for token in _TOKEN_SPLIT_RE.split(lowered) if token}
