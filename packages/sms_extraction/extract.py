"""Extraction orchestration: local parser first, remote extractor second.

Public API:
    - :func:`extract_transaction`
    - :func:`find_sender_rule`
    - :func:`apply_sender_rule`

Each call is a single pass. The local parser is tried first; on a miss the
remote extractor is called at most once, and only when the caller reports
being online. A matching sender rule with a default category overrides the
category from either source. Nothing here retries.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from datetime import date

from .categories import match_category
from .errors import EmptyInput, OfflineNoMatch, RemoteExtractionFailed
from .local_parser import parse_locally
from .logging_setup import get_logger
from .models import CandidateRecord, ExtractionResult, Provenance, SenderRule
from .remote import OpenAIRemoteExtractor, RemoteExtractor, parse_remote_response

_logger = get_logger("sms_extraction.extract")


def find_sender_rule(sender: str | None, rules: Iterable[SenderRule]) -> SenderRule | None:
    """Return the first rule whose sender name equals ``sender`` ignoring case."""

    if not sender:
        return None
    for rule in rules:
        if rule.matches(sender):
            return rule
    return None


def apply_sender_rule(record: CandidateRecord, rule: SenderRule | None) -> CandidateRecord:
    """Return ``record`` with the rule's default category, when it has one."""

    if rule is None or not rule.default_category:
        return record
    category = match_category(rule.default_category)
    if category is None:
        # Rules written outside save_sender_rule may carry unknown labels
        _logger.warning(
            "extract:sender_override_skipped sender=%s category=%r",
            rule.sender_name,
            rule.default_category,
        )
        return record
    _logger.info(
        "extract:sender_override sender=%s category=%s",
        rule.sender_name,
        category,
    )
    return dataclasses.replace(record, category=category)


def extract_transaction(
    text: str,
    sender: str | None = None,
    rules: Iterable[SenderRule] = (),
    *,
    is_online: bool = True,
    remote: RemoteExtractor | None = None,
    today: date | None = None,
) -> ExtractionResult:
    """Extract a transaction record from one notification message.

    Parameters
    ----------
    text:
        Raw message text.
    sender:
        Optional sender label used for the sender-rule lookup and passed to
        the remote extractor as a hint.
    rules:
        Sender rules to consult; read only.
    is_online:
        Whether the remote extractor may be reached.
    remote:
        Remote extractor to use on a local miss. Defaults to a new
        :class:`~sms_extraction.remote.OpenAIRemoteExtractor`.
    today:
        Reference date for the local parser's date fallback.

    Raises
    ------
    EmptyInput
        ``text`` is blank.
    OfflineNoMatch
        No local rule matched and ``is_online`` is false.
    RemoteExtractionFailed
        The remote call failed or returned data violating the output contract.
    """

    if not text or not text.strip():
        raise EmptyInput()

    rule = find_sender_rule(sender, tuple(rules))

    local = parse_locally(text, today=today)
    if local is not None:
        _logger.info("extract:local_hit merchant=%s", local.merchant)
        return ExtractionResult(
            record=apply_sender_rule(local, rule),
            provenance=Provenance.LOCAL,
            sender_rule=rule,
        )

    if not is_online:
        _logger.info("extract:offline_miss")
        raise OfflineNoMatch()

    extractor = remote if remote is not None else OpenAIRemoteExtractor()
    try:
        body = extractor.extract(text, sender)
        record = parse_remote_response(body)
    except Exception as e:  # noqa: BLE001 - every remote failure is terminal for this attempt
        _logger.warning("extract:remote_failed error=%s", e.__class__.__name__)
        raise RemoteExtractionFailed() from e

    _logger.info("extract:remote_hit merchant=%s", record.merchant)
    return ExtractionResult(
        record=apply_sender_rule(record, rule),
        provenance=Provenance.REMOTE,
        sender_rule=rule,
    )


__all__ = ["apply_sender_rule", "extract_transaction", "find_sender_rule"]
