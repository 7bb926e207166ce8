from __future__ import annotations

import dataclasses
import io
import logging
from decimal import Decimal

import pytest

import sms_extraction.logging_setup as logging_setup
from sms_extraction.errors import RecordNotFound
from sms_extraction.models import CandidateRecord, Direction, SenderRule

VALID = {
    "amount": Decimal("10"),
    "currency": "USD",
    "merchant": "Uber",
    "category": "Transport",
    "direction": Direction.EXPENSE,
    "date": "2025-01-31",
}


@pytest.mark.parametrize(
    "patch",
    [
        {"amount": Decimal("0")},
        {"amount": Decimal("-1")},
        {"amount": 10},
        {"currency": ""},
        {"merchant": ""},
        {"merchant": " Uber"},
        {"category": "Groceries"},
        {"date": "2025-02-30"},
    ],
)
def test_candidate_record_rejects_invalid_fields(patch):
    with pytest.raises(ValueError):
        CandidateRecord(**{**VALID, **patch})


def test_candidate_record_is_immutable():
    rec = CandidateRecord(**VALID)
    with pytest.raises(dataclasses.FrozenInstanceError):
        rec.category = "Other"  # type: ignore[misc]


def test_sender_rule_matching():
    rule = SenderRule(id="1", sender_name="HDFC")
    assert rule.matches("hdfc")
    assert not rule.matches(None)
    assert not rule.matches("HDFC Bank")


def test_record_not_found_is_a_key_error():
    err = RecordNotFound("sender rule", "abc")
    assert isinstance(err, KeyError)
    assert str(err) == "sender rule not found: abc"


@pytest.fixture
def _fresh_logging(monkeypatch: pytest.MonkeyPatch):
    pkg = logging.getLogger("sms_extraction")
    saved = (list(pkg.handlers), pkg.level, pkg.propagate)
    monkeypatch.setattr(logging_setup, "_handler", None)
    pkg.handlers = []
    yield pkg
    pkg.handlers, pkg.level, pkg.propagate = saved


def test_configure_logging_attaches_one_handler(_fresh_logging, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SMS_EXTRACTION_LOG_LEVEL", "debug")
    buf = io.StringIO()

    logging_setup.configure_logging(stream=buf, fmt="%(name)s %(message)s")
    logging_setup.configure_logging(stream=io.StringIO())

    assert len(_fresh_logging.handlers) == 1
    assert _fresh_logging.level == logging.DEBUG
    logging_setup.get_logger("sms_extraction.extract").debug("extract:probe n=%d", 1)
    assert buf.getvalue() == "sms_extraction.extract extract:probe n=1\n"


def test_get_logger_is_silent_until_configured(_fresh_logging):
    logging_setup.get_logger("sms_extraction.remote")
    assert any(isinstance(h, logging.NullHandler) for h in _fresh_logging.handlers)
