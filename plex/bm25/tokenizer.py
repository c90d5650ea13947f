"""
Tokenizer for BM25 text processing.

Tokenization pipeline:
1. Read the configured fields from the record (missing field → "")
2. Join field values with a space
3. Lowercase conversion
4. Split on runs of whitespace, dropping empty tokens
5. Optional Snowball stemming

Queries go through steps 3-5 only. Punctuation is kept: "02134" and
"o'brien" are single tokens, which is what exact field matching needs.
"""

from collections.abc import Mapping
from typing import Any, List, Sequence

from ..errors import MalformedInputError
from .stemmer import stem_all


def _field_text(record: Mapping, field: str) -> str:
    value = record.get(field)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    # Numeric fields (zip codes loaded as numbers) are indexed as text
    if isinstance(value, float) and value.is_integer():
        # 2134.0 reads as "2134", like a number printed by the loader
        return str(int(value))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise MalformedInputError(
        f"Field {field!r} must be a string or number, got {type(value).__name__}"
    )


def _split(text: str, stemming: bool) -> List[str]:
    tokens = text.lower().split()
    if stemming:
        tokens = stem_all(tokens)
    return tokens


def tokenize(record: Any, fields: Sequence[str], stemming: bool = False) -> List[str]:
    """
    Tokenize a multi-field record.

    Args:
        record: Mapping of field name → value; extra fields are ignored
        fields: Field names to read, in order
        stemming: Apply Snowball stemming to every token

    Returns:
        List of lowercase tokens (may be empty)

    Raises:
        MalformedInputError: record is not a mapping, or a field holds a
            non-text value (list, dict, bool, ...)

    Examples:
        >>> tokenize({"city": "South Boston", "state": "MA"}, ["city", "state", "zip"])
        ['south', 'boston', 'ma']

        >>> tokenize({}, ["city"])
        []
    """
    if not isinstance(record, Mapping):
        raise MalformedInputError(
            f"Document must be a mapping of fields, got {type(record).__name__}"
        )
    text = " ".join(_field_text(record, field) for field in fields)
    return _split(text, stemming)


def tokenize_query(text: Any, stemming: bool = False) -> List[str]:
    """
    Tokenize a free-text query with the same lowercase/whitespace rule.

    Examples:
        >>> tokenize_query("  New   YORK ")
        ['new', 'york']
    """
    if not isinstance(text, str):
        raise MalformedInputError(f"Query must be a string, got {type(text).__name__}")
    return _split(text, stemming)
