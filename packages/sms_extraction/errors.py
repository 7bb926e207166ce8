"""Exception types raised by the extraction pipeline and the record store.

Only the orchestrator (:mod:`sms_extraction.extract`) raises the user-facing
extraction failures. The local parser and classifiers degrade to defaults
instead of raising.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for every extraction failure reported to callers."""


class EmptyInput(ExtractionError):
    """The supplied message text was blank; nothing was parsed."""

    def __init__(self, message: str = "SMS text is empty; paste the message content.") -> None:
        super().__init__(message)


class LocalParseMiss(ExtractionError):
    """No extraction rule matched the message.

    Internal signal. :func:`~sms_extraction.local_parser.parse_locally` returns
    ``None`` for a miss; :func:`~sms_extraction.local_parser.require_local_parse`
    raises this for callers that prefer exception flow.
    """

    def __init__(self, message: str = "no local extraction rule matched") -> None:
        super().__init__(message)


class OfflineNoMatch(ExtractionError):
    """Local parsing missed and the remote extractor is unreachable."""

    def __init__(
        self,
        message: str = "Could not auto-detect format offline. Please enter details manually.",
    ) -> None:
        super().__init__(message)


class RemoteExtractionFailed(ExtractionError):
    """The remote extractor errored or returned unusable data.

    The originating exception is attached as ``__cause__``.
    """

    def __init__(
        self,
        message: str = "Could not understand the SMS. Please try manual entry.",
    ) -> None:
        super().__init__(message)


class RecordNotFound(KeyError):
    """A record-store lookup by identifier found nothing."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(record_id)
        self.kind = kind
        self.record_id = record_id

    def __str__(self) -> str:
        return f"{self.kind} not found: {self.record_id}"


__all__ = [
    "EmptyInput",
    "ExtractionError",
    "LocalParseMiss",
    "OfflineNoMatch",
    "RecordNotFound",
    "RemoteExtractionFailed",
]
