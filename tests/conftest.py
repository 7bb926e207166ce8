"""Pytest configuration for test isolation.

The workspace packages live under ``packages/`` and ``libs/db/src`` rather than
at the repo root, so both directories are put on ``sys.path`` here, followed
by the repo root itself (which makes ``tests.helpers`` importable).

Environment variables read by the package (``DATABASE_URL``, the OpenAI key
and the ``SMS_EXTRACTION_*`` settings) are cleared for every test so that a
developer's shell or ``.env`` never leaks into assertions. Tests that need a
database request the ``database_url`` fixture, which points at a fresh
file-backed SQLite store under the test's own temporary directory.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_SRC_DIRS = [_ROOT / "packages", _ROOT / "libs" / "db" / "src", _ROOT]
sys.path[:0] = [str(p) for p in _SRC_DIRS if str(p) not in sys.path]

_ENV_VARS = (
    "DATABASE_URL",
    "OPENAI_API_KEY",
    "SMS_EXTRACTION_MODEL",
    "SMS_EXTRACTION_REMOTE_TIMEOUT",
    "SMS_EXTRACTION_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def database_url(tmp_path: Path) -> Iterator[str]:
    """Create a per-test SQLite database with the ledger schema."""

    from db.client import dispose_engines, init_schema

    db_file = tmp_path / "db" / "ledger.sqlite3"
    # Using a file-backed SQLite DB ensures multiple connections share state
    db_file.parent.mkdir(parents=True, exist_ok=True)
    url = f"sqlite+pysqlite:///{os.fspath(db_file)}"
    init_schema(database_url=url)
    try:
        yield url
    finally:
        dispose_engines()
