"""Shared SQLAlchemy models registry for the workspace database.

Currently holds the SMS ledger tables used by ``sms_extraction``.
"""

from .ledger import Base, SmsSenderRule, SmsTransaction

__all__ = [
    "Base",
    "SmsSenderRule",
    "SmsTransaction",
]
