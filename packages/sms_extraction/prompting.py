"""Prompt construction for remote SMS extraction.

This module builds:
- The system instructions for the extraction task.
- The user content carrying the message text and sender hint.
- The strict ``response_format`` (JSON Schema) object for the OpenAI
  Responses API.

Only the message text and the sender hint are passed through; everything else
here is wording owned by this module.
"""

from __future__ import annotations

from openai.types.responses.response_format_text_json_schema_config_param import (
    ResponseFormatTextJSONSchemaConfigParam,
)

from .currency import DEFAULT_CURRENCY
from .models import CATEGORIES, FALLBACK_CATEGORY, Direction

BEGIN_SMS = "BEGIN_SMS\n"
END_SMS = "\nEND_SMS"


def build_system_instructions() -> str:
    """Return the fixed system instructions for single-message extraction."""

    return (
        "You extract one financial transaction from a bank notification message. "
        "Report the amount as a positive number, the currency as a 3-letter code, the "
        "merchant, person or entity involved, one category from the provided list, the "
        "direction, and the transaction date. Output JSON only that conforms to the "
        "specified schema; never add prose."
    )


def build_user_content(sms_text: str, sender_hint: str | None, *, current_year: int) -> str:
    """Build the user content for one message.

    The raw message is delimited by ``BEGIN_SMS``/``END_SMS`` markers so that
    quotes or newlines inside it cannot be confused with the instructions.
    """

    lines = [
        "Extract financial transaction details from the following SMS message.",
        f"Sender: {sender_hint.strip() if sender_hint and sender_hint.strip() else 'Unknown'}",
        "",
        f"Current year: {current_year} (use this if the year is missing from the date).",
        "",
        "Categorize the transaction into exactly one of these categories: "
        + ", ".join(CATEGORIES)
        + f". If the category is unclear, use {FALLBACK_CATEGORY!r}.",
        "",
        "Detect the currency (for example USD, INR, GHS, EUR, GBP). Default to "
        f"{DEFAULT_CURRENCY!r} if none is stated but the text clearly refers to money.",
        "",
        f"Use direction {Direction.INCOME.value!r} for credits, deposits and money received; "
        f"use {Direction.EXPENSE.value!r} for debits, purchases and payments.",
        "",
        "Report the date as YYYY-MM-DD.",
        "",
        BEGIN_SMS.rstrip("\n"),
        sms_text,
        END_SMS.lstrip("\n"),
    ]
    return "\n".join(lines)


def build_response_format() -> ResponseFormatTextJSONSchemaConfigParam:
    """Return the strict JSON Schema response format for one transaction.

    Schema shape:
    {
      "type": "json_schema",
      "name": "sms_transaction",
      "schema": {
        "type": "object",
        "properties": {
          "amount": {"type": "number"},
          "currency": {"type": "string"},
          "merchant": {"type": "string"},
          "category": {"type": "string", "enum": [...]},
          "direction": {"type": "string", "enum": ["income", "expense"]},
          "date": {"type": "string"}
        },
        "required": [...all six...],
        "additionalProperties": false
      },
      "strict": true
    }
    """

    result: ResponseFormatTextJSONSchemaConfigParam = {
        "type": "json_schema",
        "name": "sms_transaction",
        "schema": {
            "type": "object",
            "properties": {
                "amount": {
                    "type": "number",
                    "description": "The numeric amount of the transaction",
                },
                "currency": {
                    "type": "string",
                    "description": "The 3-letter currency code (e.g. USD, INR)",
                },
                "merchant": {
                    "type": "string",
                    "description": "The name of the merchant, person, or entity",
                },
                "category": {"type": "string", "enum": list(CATEGORIES)},
                "direction": {
                    "type": "string",
                    "enum": [d.value for d in Direction],
                },
                "date": {
                    "type": "string",
                    "description": "Transaction date in ISO 8601 format (YYYY-MM-DD)",
                },
            },
            "required": ["amount", "currency", "merchant", "category", "direction", "date"],
            "additionalProperties": False,
        },
        "strict": True,
    }
    return result
