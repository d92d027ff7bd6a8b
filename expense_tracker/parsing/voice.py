"""
Voice Command Parser

Turns a spoken transcript into a DraftExpense, e.g.

    "add 45.50 dollars for groceries shopping"
        -> DraftExpense(amount="45.50", category="Groceries", description="shopping")

IMPORTANT: The parser only PROPOSES a draft. The user still confirms it
through the add-expense form before anything reaches the log.

Matching is deliberately plain:
- the amount is the leftmost "<number> dollar(s)/buck(s)/$" token
- categories and filler words match as substrings, so "seafood" reads as
  food and "address" loses its "add"
- the category keyword is cut from the description only as a whole word
- without an amount there is no draft at all (None)
"""

import re
from typing import Optional

from expense_tracker.models.expense import DraftExpense, ExpenseCategory


AMOUNT_PATTERN = re.compile(r"(\d+(?:\.\d{2})?)\s*(?:dollars?|bucks?|\$)")
FILLER_PATTERN = re.compile(r"add|for|spent|expense", re.IGNORECASE)


def extract_amount(transcript: str) -> Optional[re.Match]:
    """Leftmost number-with-unit token, matched on the lower-cased text."""
    return AMOUNT_PATTERN.search(transcript.lower())


def extract_category(transcript: str) -> ExpenseCategory:
    """First category keyword in scan order, or OTHER."""
    return ExpenseCategory.match_keyword(transcript) or ExpenseCategory.OTHER


def extract_description(
    transcript: str,
    amount_token: str,
    category: ExpenseCategory,
) -> str:
    """
    What is left of the transcript once the amount token, the category
    keyword and the filler words are taken out.

    The keyword goes only where it stands as a whole word, and only once,
    so "seafood dinner" keeps its "seafood".

    The amount token comes from the lower-cased text and is removed from
    the original text as-is, so "20 Dollars" survives into the description.
    """
    description = transcript.replace(amount_token, "", 1)
    description = re.sub(
        rf"\b{re.escape(category.keyword)}\b", "", description, count=1, flags=re.IGNORECASE
    )
    description = FILLER_PATTERN.sub("", description).strip()
    return description or category.value


def parse_voice_command(transcript: str) -> Optional[DraftExpense]:
    """
    Parse a transcript into a draft expense.

    Returns None when the transcript has no amount; no partial draft is
    ever produced.
    """
    amount_match = extract_amount(transcript)
    if not amount_match:
        return None

    category = extract_category(transcript)
    description = extract_description(transcript, amount_match.group(0), category)

    return DraftExpense(
        amount=amount_match.group(1),
        category=category.value,
        description=description,
    )
