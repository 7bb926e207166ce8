# ruff: noqa: I001
"""Record store operations backed by the shared database library.

Functions here read and write the ``sms_transactions`` and
``sms_sender_rules`` tables owned by ``libs/db``. Every function takes an open
SQLAlchemy :class:`~sqlalchemy.orm.Session`; callers own the transaction
boundary (normally :func:`db.client.session_scope`).

The extraction core never imports this module. :func:`ingest_sms` is the one
place that joins the two: it loads the stored sender rules, runs the
orchestrator, and saves the result when the matched sender is set to
auto-process.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from db.models.ledger import SmsSenderRule, SmsTransaction
from .categories import match_category
from .errors import RecordNotFound
from .extract import extract_transaction
from .logging_setup import get_logger
from .models import (
    CandidateRecord,
    Direction,
    ExtractionResult,
    Provenance,
    SenderRule,
    StoredTransaction,
)
from .remote import RemoteExtractor

_logger = get_logger("sms_extraction.persistence")


def _new_id() -> str:
    return str(uuid.uuid4())


def _norm_str(v: str | None) -> str | None:
    if v is None:
        return None
    s = v.strip()
    return s or None


def _to_stored(row: SmsTransaction) -> StoredTransaction:
    return StoredTransaction(
        id=row.public_id,
        amount=Decimal(row.amount),
        currency=row.currency,
        description=row.description,
        category=row.category,
        direction=Direction(row.direction),
        date=row.date,
        raw_sms=row.raw_sms,
        sender=row.sender,
        source=Provenance(row.source),
        created_at=row.created_at,
    )


def _to_rule(row: SmsSenderRule) -> SenderRule:
    return SenderRule(
        id=row.public_id,
        sender_name=row.sender_name,
        auto_process=bool(row.auto_process),
        default_category=row.default_category,
    )


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def save_record(
    session: Session,
    record: CandidateRecord,
    *,
    raw_sms: str | None = None,
    sender: str | None = None,
    provenance: Provenance = Provenance.MANUAL,
    record_id: str | None = None,
) -> str:
    """Insert ``record`` and return its identifier.

    ``record_id`` defaults to a fresh UUID4 string.
    """

    public_id = record_id or _new_id()
    session.add(
        SmsTransaction(
            public_id=public_id,
            amount=record.amount,
            currency=record.currency,
            description=record.merchant,
            category=record.category,
            direction=record.direction.value,
            date=date.fromisoformat(record.date),
            raw_sms=raw_sms,
            sender=_norm_str(sender),
            source=provenance.value,
        )
    )
    session.flush()
    _logger.info(
        "persistence:saved id=%s source=%s category=%s",
        public_id,
        provenance.value,
        record.category,
    )
    return public_id


def list_records(session: Session) -> list[StoredTransaction]:
    """Return every stored transaction, newest first."""

    rows = session.scalars(select(SmsTransaction).order_by(SmsTransaction.pk.desc()))
    return [_to_stored(r) for r in rows]


def delete_record(session: Session, record_id: str) -> None:
    """Delete one transaction; raise :class:`RecordNotFound` if absent."""

    result = session.execute(delete(SmsTransaction).where(SmsTransaction.public_id == record_id))
    if result.rowcount == 0:
        raise RecordNotFound("transaction", record_id)


# ---------------------------------------------------------------------------
# Sender rules
# ---------------------------------------------------------------------------


def _find_rule_row(session: Session, rule_id: str) -> SmsSenderRule | None:
    stmt = select(SmsSenderRule).where(SmsSenderRule.public_id == rule_id)
    return session.scalars(stmt).first()


def get_sender_rule(session: Session, rule_id: str) -> SenderRule:
    """Return one sender rule; raise :class:`RecordNotFound` if absent."""

    row = _find_rule_row(session, rule_id)
    if row is None:
        raise RecordNotFound("sender rule", rule_id)
    return _to_rule(row)


def list_sender_rules(session: Session) -> list[SenderRule]:
    """Return every sender rule in creation order."""

    rows = session.scalars(select(SmsSenderRule).order_by(SmsSenderRule.pk))
    return [_to_rule(r) for r in rows]


def save_sender_rule(session: Session, rule: SenderRule) -> SenderRule:
    """Insert or replace the rule with ``rule.id``.

    The sender name is trimmed and must be non-empty. A default category must
    name one of the fixed categories (matched case-insensitively) and is
    stored in its canonical spelling.
    """

    sender_name = _norm_str(rule.sender_name)
    if sender_name is None:
        raise ValueError("sender_name must be non-empty")
    category: str | None = None
    if rule.default_category is not None and rule.default_category.strip():
        category = match_category(rule.default_category)
        if category is None:
            raise ValueError(f"unknown category: {rule.default_category!r}")

    rule_id = rule.id or _new_id()
    row = _find_rule_row(session, rule_id)
    if row is None:
        row = SmsSenderRule(public_id=rule_id)
        session.add(row)
    row.sender_name = sender_name
    row.auto_process = rule.auto_process
    row.default_category = category
    session.flush()
    return _to_rule(row)


def delete_sender_rule(session: Session, rule_id: str) -> None:
    """Delete one sender rule; raise :class:`RecordNotFound` if absent."""

    result = session.execute(delete(SmsSenderRule).where(SmsSenderRule.public_id == rule_id))
    if result.rowcount == 0:
        raise RecordNotFound("sender rule", rule_id)


def clear_all(session: Session) -> tuple[int, int]:
    """Delete every transaction and sender rule.

    Returns ``(transactions_deleted, rules_deleted)``.
    """

    tx_count = session.execute(delete(SmsTransaction)).rowcount
    rule_count = session.execute(delete(SmsSenderRule)).rowcount
    _logger.info("persistence:cleared transactions=%d rules=%d", tx_count, rule_count)
    return tx_count, rule_count


# ---------------------------------------------------------------------------
# Extraction + persistence
# ---------------------------------------------------------------------------


def ingest_sms(
    session: Session,
    text: str,
    sender: str | None = None,
    *,
    is_online: bool = True,
    remote: RemoteExtractor | None = None,
    force_save: bool = False,
) -> tuple[ExtractionResult, str | None]:
    """Extract a record using the stored sender rules and save it when allowed.

    The record is saved when ``force_save`` is set or when the matched sender
    rule has ``auto_process`` enabled. Returns the extraction result and the
    saved identifier (``None`` when nothing was saved). Extraction errors
    propagate unchanged.
    """

    rules = list_sender_rules(session)
    result = extract_transaction(text, sender, rules, is_online=is_online, remote=remote)

    auto = result.sender_rule is not None and result.sender_rule.auto_process
    if not (force_save or auto):
        return result, None

    saved_id = save_record(
        session,
        result.record,
        raw_sms=text,
        sender=sender,
        provenance=result.provenance,
    )
    return result, saved_id


__all__ = [
    "clear_all",
    "delete_record",
    "delete_sender_rule",
    "get_sender_rule",
    "ingest_sms",
    "list_records",
    "list_sender_rules",
    "save_record",
    "save_sender_rule",
]
