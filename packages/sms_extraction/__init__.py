"""Public interface for the ``sms_extraction`` package.

This module exposes the extraction entry points and the public models/types as
the stable import surface. There is no runtime logic here, only symbol
re-exports. Database-backed helpers live in ``sms_extraction.persistence`` and
are not imported here so the extraction core stays usable without a database.
"""

from .categories import classify, coerce_category
from .currency import normalize_currency
from .dates import extract_date
from .errors import (
    EmptyInput,
    ExtractionError,
    LocalParseMiss,
    OfflineNoMatch,
    RecordNotFound,
    RemoteExtractionFailed,
)
from .extract import apply_sender_rule, extract_transaction, find_sender_rule
from .local_parser import parse_locally, require_local_parse
from .models import (
    CATEGORIES,
    CandidateRecord,
    Direction,
    ExtractionResult,
    Provenance,
    SenderRule,
    StoredTransaction,
)
from .remote import OpenAIRemoteExtractor, RemoteExtractor

__all__ = [
    # API
    "extract_transaction",
    "parse_locally",
    "require_local_parse",
    "find_sender_rule",
    "apply_sender_rule",
    "classify",
    "coerce_category",
    "extract_date",
    "normalize_currency",
    "OpenAIRemoteExtractor",
    "RemoteExtractor",
    # Models / types
    "CATEGORIES",
    "CandidateRecord",
    "Direction",
    "ExtractionResult",
    "Provenance",
    "SenderRule",
    "StoredTransaction",
    # Errors
    "ExtractionError",
    "EmptyInput",
    "LocalParseMiss",
    "OfflineNoMatch",
    "RemoteExtractionFailed",
    "RecordNotFound",
]
