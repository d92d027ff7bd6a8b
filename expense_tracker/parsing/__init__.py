"""Natural-language parsing package."""

from expense_tracker.parsing.voice import (
    AMOUNT_PATTERN,
    extract_amount,
    extract_category,
    extract_description,
    parse_voice_command,
)

__all__ = [
    "AMOUNT_PATTERN",
    "extract_amount",
    "extract_category",
    "extract_description",
    "parse_voice_command",
]
