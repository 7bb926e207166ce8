"""Remote (language-model) extraction through the OpenAI Responses API.

Public API:
    - :class:`RemoteExtractor` (protocol the orchestrator depends on)
    - :class:`OpenAIRemoteExtractor`
    - :func:`parse_remote_response`

The extractor performs exactly one request per call and never retries; the
orchestrator reports any failure to the caller, who decides whether to try
again. Timeouts belong to the OpenAI client transport. No client is created
and no environment is read at import time.
"""

from __future__ import annotations

import datetime
import json
import os
import time
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Protocol

from openai import OpenAI
from openai.types.responses import ResponseTextConfigParam
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from . import prompting
from .categories import coerce_category
from .currency import normalize_currency
from .logging_setup import get_logger
from .models import CandidateRecord, Direction

_DEFAULT_MODEL = "gpt-5"
_MODEL_ENV = "SMS_EXTRACTION_MODEL"
_TIMEOUT_ENV = "SMS_EXTRACTION_REMOTE_TIMEOUT"

_logger = get_logger("sms_extraction.remote")


class RemoteExtractor(Protocol):
    """Anything that turns ``(sms_text, sender_hint)`` into a JSON object."""

    def extract(self, sms_text: str, sender_hint: str | None) -> Mapping[str, Any]: ...


# ---- Response validation -----------------------------------------------------


class RemoteExtraction(BaseModel):
    """Typed, validated view of the remote extractor's JSON object.

    ``type`` is accepted as an alias for ``direction``. Out-of-set categories
    coerce to ``Other`` and currency tokens go through the same normalizer as
    the local parser.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    amount: Decimal = Field(gt=0)
    currency: str
    merchant: str = Field(min_length=1)
    category: str
    direction: Direction = Field(validation_alias=AliasChoices("direction", "type"))
    date: datetime.date

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_from_number(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("amount must be a number")
        if isinstance(v, float):
            # Go through repr so 12.1 stays 12.1 rather than its binary expansion
            return Decimal(repr(v))
        if isinstance(v, str):
            return v.replace(",", "")
        return v

    @field_validator("currency")
    @classmethod
    def _normalize_currency(cls, v: str) -> str:
        return normalize_currency(v)

    @field_validator("category")
    @classmethod
    def _coerce_category(cls, v: str) -> str:
        return coerce_category(v)

    @field_validator("direction", mode="before")
    @classmethod
    def _lower_direction(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    def to_record(self) -> CandidateRecord:
        return CandidateRecord(
            amount=self.amount,
            currency=self.currency,
            merchant=self.merchant,
            category=self.category,
            direction=self.direction,
            date=self.date.isoformat(),
        )


def parse_remote_response(body: Mapping[str, Any]) -> CandidateRecord:
    """Validate a decoded remote response and build a :class:`CandidateRecord`.

    Raises ``ValueError`` (including Pydantic's ``ValidationError``) when the
    object does not satisfy the output contract.
    """

    if not isinstance(body, Mapping):
        raise ValueError("Invalid response: expected a JSON object at top level")
    return RemoteExtraction.model_validate(body).to_record()


# ---- OpenAI client -----------------------------------------------------------


def _extract_response_json_mapping(resp: Any) -> Mapping[str, Any]:
    """Decode the JSON object from an OpenAI Responses SDK result.

    Prefers ``resp.output_text`` and falls back to
    ``resp.output[0].content[0].text``.
    """

    text: str | None = getattr(resp, "output_text", None)
    if not text:
        output = getattr(resp, "output", None)
        content = getattr(output[0], "content", None) if output else None
        if content:
            txt_obj = getattr(content[0], "text", None)
            if isinstance(txt_obj, str):
                text = txt_obj
            else:
                maybe_val = getattr(txt_obj, "value", None)
                if isinstance(maybe_val, str):
                    text = maybe_val
    if not text or not isinstance(text, str):
        raise ValueError("Unexpected Responses API shape; unable to locate text output")

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError("Model output was not valid JSON per the requested schema") from e
    if not isinstance(decoded, Mapping):
        raise ValueError("Model output was JSON but not an object")
    return decoded


def _timeout_from_env() -> float | None:
    raw = os.getenv(_TIMEOUT_ENV)
    if not raw or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        _logger.warning("remote:bad_timeout value=%r", raw)
        return None
    return value if value > 0 else None


class OpenAIRemoteExtractor:
    """Remote extractor backed by the OpenAI Responses API.

    Parameters
    ----------
    model:
        Model name; defaults to ``SMS_EXTRACTION_MODEL`` or ``gpt-5``.
    timeout:
        Transport timeout in seconds; defaults to
        ``SMS_EXTRACTION_REMOTE_TIMEOUT`` or the SDK default.

    ``OPENAI_API_KEY`` is read by the SDK when the client is created on the
    first :meth:`extract` call.
    """

    def __init__(self, *, model: str | None = None, timeout: float | None = None) -> None:
        self.model = model or os.getenv(_MODEL_ENV) or _DEFAULT_MODEL
        self.timeout = timeout if timeout is not None else _timeout_from_env()
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if self.timeout is not None:
                self._client = OpenAI(timeout=self.timeout)
            else:
                self._client = OpenAI()
        return self._client

    def extract(self, sms_text: str, sender_hint: str | None) -> Mapping[str, Any]:
        """Send one extraction request and return the decoded JSON object."""

        text_cfg = ResponseTextConfigParam(format=prompting.build_response_format())
        user_content = prompting.build_user_content(
            sms_text, sender_hint, current_year=datetime.date.today().year
        )

        _logger.info("remote:request model=%s chars=%d", self.model, len(sms_text))
        t0 = time.perf_counter()
        try:
            resp = self._get_client().responses.create(
                model=self.model,
                instructions=prompting.build_system_instructions(),
                input=user_content,
                text=text_cfg,
            )
            decoded = _extract_response_json_mapping(resp)
        except Exception as e:
            dt_ms = (time.perf_counter() - t0) * 1000.0
            _logger.error(
                "remote:failed latency_ms=%.2f error=%s", dt_ms, e.__class__.__name__
            )
            raise
        dt_ms = (time.perf_counter() - t0) * 1000.0
        _logger.info("remote:done latency_ms=%.2f", dt_ms)
        return decoded


__all__ = [
    "OpenAIRemoteExtractor",
    "RemoteExtraction",
    "RemoteExtractor",
    "parse_remote_response",
]
