# ruff: noqa: I001
"""CLI for the ``sms_extraction`` package.

This module exposes callable command handlers (``cmd_*``, each returning a
process exit code) and a Typer-based console interface that wraps them.
Environment variables (``OPENAI_API_KEY``, ``DATABASE_URL`` and the
``SMS_EXTRACTION_*`` settings) are loaded from a local ``.env`` using
``python-dotenv`` before any command runs. Business logic lives in
``sms_extraction.extract`` and ``sms_extraction.persistence``.

Output goes to stdout as tab-separated lines; errors go to stderr with a
non-zero exit status.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from .logging_setup import configure_logging
from .models import CATEGORIES, ExtractionResult, SenderRule, StoredTransaction


# ---- Small module-level helpers ----------------------------------------------


def _resolve_database_url(database_url: str | None) -> str | None:
    return database_url or os.getenv("DATABASE_URL") or None


def _format_result(result: ExtractionResult, saved_id: str | None) -> str:
    r = result.record
    fields = [
        result.provenance.value,
        r.date,
        r.direction.value,
        f"{r.amount}",
        r.currency,
        r.category,
        r.merchant,
    ]
    if saved_id:
        fields.append(saved_id)
    return "\t".join(fields)


def _format_stored(t: StoredTransaction) -> str:
    return "\t".join(
        [
            t.id,
            t.date.isoformat(),
            t.direction.value,
            f"{t.amount:.2f}",
            t.currency,
            t.category,
            t.description,
            t.sender or "",
        ]
    )


def _format_rule(rule: SenderRule) -> str:
    return "\t".join(
        [
            rule.id,
            rule.sender_name,
            "auto" if rule.auto_process else "manual",
            rule.default_category or "",
        ]
    )


def _require_db(database_url: str | None) -> str | None:
    url = _resolve_database_url(database_url)
    if url is None:
        print("Error: DATABASE_URL is not set (or pass --database-url).", file=sys.stderr)
    return url


# ---- Command handlers --------------------------------------------------------


def cmd_extract(
    text: str,
    *,
    sender: str | None = None,
    offline: bool = False,
    save: bool = False,
    database_url: str | None = None,
) -> int:
    """Extract one message and print the record.

    With a database configured, stored sender rules are applied and the record
    is saved when ``save`` is set or the sender's rule auto-processes. Without
    one, extraction runs with no sender rules and ``save`` is an error.
    """

    from .errors import ExtractionError
    from .extract import extract_transaction

    url = _resolve_database_url(database_url)
    if url is None:
        if save:
            print("Error: --save requires DATABASE_URL (or --database-url).", file=sys.stderr)
            return 1
        try:
            result = extract_transaction(text, sender, (), is_online=not offline)
        except ExtractionError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        typer.echo(_format_result(result, None))
        return 0

    from db.client import init_schema, session_scope
    from .persistence import ingest_sms

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            result, saved_id = ingest_sms(
                session, text, sender, is_online=not offline, force_save=save
            )
    except ExtractionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: extraction failed: {e}", file=sys.stderr)
        return 1

    typer.echo(_format_result(result, saved_id))
    return 0


def cmd_list_records(*, database_url: str | None = None) -> int:
    """Print stored transactions, newest first."""

    url = _require_db(database_url)
    if url is None:
        return 1

    from db.client import init_schema, session_scope
    from .persistence import list_records

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            records = list_records(session)
    except Exception as e:
        print(f"Error: failed to list records: {e}", file=sys.stderr)
        return 1

    for t in records:
        typer.echo(_format_stored(t))
    return 0


def cmd_delete_record(record_id: str, *, database_url: str | None = None) -> int:
    url = _require_db(database_url)
    if url is None:
        return 1

    from db.client import init_schema, session_scope
    from .errors import RecordNotFound
    from .persistence import delete_record

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            delete_record(session, record_id)
    except RecordNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: failed to delete record: {e}", file=sys.stderr)
        return 1
    typer.echo(f"deleted\t{record_id}")
    return 0


def cmd_add_rule(
    sender_name: str,
    *,
    category: str | None = None,
    auto_process: bool = True,
    database_url: str | None = None,
) -> int:
    """Create a sender rule and print it."""

    url = _require_db(database_url)
    if url is None:
        return 1

    from db.client import init_schema, session_scope
    from .persistence import save_sender_rule

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            saved = save_sender_rule(
                session,
                SenderRule(
                    id="",
                    sender_name=sender_name,
                    auto_process=auto_process,
                    default_category=category,
                ),
            )
    except ValueError as e:
        print(f"Error: invalid rule: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: failed to save rule: {e}", file=sys.stderr)
        return 1
    typer.echo(_format_rule(saved))
    return 0


def cmd_list_rules(*, database_url: str | None = None) -> int:
    url = _require_db(database_url)
    if url is None:
        return 1

    from db.client import init_schema, session_scope
    from .persistence import list_sender_rules

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            rules = list_sender_rules(session)
    except Exception as e:
        print(f"Error: failed to list rules: {e}", file=sys.stderr)
        return 1
    for rule in rules:
        typer.echo(_format_rule(rule))
    return 0


def cmd_delete_rule(rule_id: str, *, database_url: str | None = None) -> int:
    url = _require_db(database_url)
    if url is None:
        return 1

    from db.client import init_schema, session_scope
    from .errors import RecordNotFound
    from .persistence import delete_sender_rule

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            delete_sender_rule(session, rule_id)
    except RecordNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: failed to delete rule: {e}", file=sys.stderr)
        return 1
    typer.echo(f"deleted\t{rule_id}")
    return 0


def cmd_toggle_rule(rule_id: str, *, database_url: str | None = None) -> int:
    """Flip a rule's auto-process flag and print the updated rule."""

    url = _require_db(database_url)
    if url is None:
        return 1

    import dataclasses

    from db.client import init_schema, session_scope
    from .errors import RecordNotFound
    from .persistence import get_sender_rule, save_sender_rule

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            current = get_sender_rule(session, rule_id)
            saved = save_sender_rule(
                session, dataclasses.replace(current, auto_process=not current.auto_process)
            )
    except RecordNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: failed to update rule: {e}", file=sys.stderr)
        return 1
    typer.echo(_format_rule(saved))
    return 0


def cmd_export_csv(output: str | None, *, database_url: str | None = None) -> int:
    """Write all stored transactions to a CSV file.

    ``output`` defaults to ``transactions_<today>.csv`` in the working
    directory. Prints the written path.
    """

    url = _require_db(database_url)
    if url is None:
        return 1

    from db.client import init_schema, session_scope
    from .export import export_filename, write_transactions_csv
    from .persistence import list_records

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            records = list_records(session)
    except Exception as e:
        print(f"Error: failed to load records: {e}", file=sys.stderr)
        return 1

    path = Path(output) if output else Path.cwd() / export_filename()
    try:
        with path.open("w", encoding="utf-8", newline="") as f:
            count = write_transactions_csv(records, f)
    except ValueError as e:
        # Empty store; don't leave an empty file behind
        path.unlink(missing_ok=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: cannot write '{path}': {e}", file=sys.stderr)
        return 1

    typer.echo(f"{count}\t{path}")
    return 0


def cmd_summary(period: str, *, database_url: str | None = None) -> int:
    """Print income/expense totals for the current month or year."""

    url = _require_db(database_url)
    if url is None:
        return 1

    from db.client import init_schema, session_scope
    from .persistence import list_records
    from .summary import summarize

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            records = list_records(session)
        result = summarize(records, period=period)  # type: ignore[arg-type]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: failed to summarize: {e}", file=sys.stderr)
        return 1

    typer.echo(f"period\t{result.period}\t{result.start.isoformat()}")
    typer.echo(f"income\t{result.total_income:.2f}")
    typer.echo(f"expense\t{result.total_expense:.2f}")
    typer.echo(f"net\t{result.net:.2f}")
    for category, total in result.expense_by_category:
        typer.echo(f"category\t{category}\t{total:.2f}")
    return 0


def cmd_clear_data(*, database_url: str | None = None) -> int:
    url = _require_db(database_url)
    if url is None:
        return 1

    from db.client import init_schema, session_scope
    from .persistence import clear_all

    try:
        init_schema(database_url=url)
        with session_scope(database_url=url) as session:
            tx_count, rule_count = clear_all(session)
    except Exception as e:
        print(f"Error: failed to clear data: {e}", file=sys.stderr)
        return 1
    typer.echo(f"cleared\t{tx_count}\t{rule_count}")
    return 0


def cmd_init_db(*, database_url: str | None = None) -> int:
    url = _require_db(database_url)
    if url is None:
        return 1

    from db.client import init_schema

    try:
        init_schema(database_url=url)
    except Exception as e:
        print(f"Error: failed to initialize database: {e}", file=sys.stderr)
        return 1
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Extract transactions from bank SMS notifications. Tries the offline "
        "parser first and falls back to OpenAI (Responses API) when online. "
        "Loads OPENAI_API_KEY and DATABASE_URL from a local .env."
    ),
)

DatabaseUrlOption = Annotated[
    str | None,
    typer.Option("--database-url", help="Override DATABASE_URL (falls back to env var)."),
]


@app.command("extract")
def extract_cmd(
    text: Annotated[str, typer.Argument(help="Full SMS text to parse.")],
    *,
    sender: Annotated[
        str | None, typer.Option(help="Sender label, e.g. HDFC or Venmo.")
    ] = None,
    offline: Annotated[
        bool, typer.Option("--offline", help="Never call the remote extractor.")
    ] = False,
    save: Annotated[
        bool, typer.Option("--save", help="Persist the record even without an auto rule.")
    ] = False,
    database_url: DatabaseUrlOption = None,
) -> None:
    """Parse one message and print the extracted record."""

    raise typer.Exit(
        cmd_extract(text, sender=sender, offline=offline, save=save, database_url=database_url)
    )


@app.command("records")
def records_cmd(*, database_url: DatabaseUrlOption = None) -> None:
    """List stored transactions, newest first."""

    raise typer.Exit(cmd_list_records(database_url=database_url))


@app.command("delete-record")
def delete_record_cmd(record_id: str, *, database_url: DatabaseUrlOption = None) -> None:
    """Delete a stored transaction by id."""

    raise typer.Exit(cmd_delete_record(record_id, database_url=database_url))


@app.command("add-rule")
def add_rule_cmd(
    sender_name: str,
    *,
    category: Annotated[
        str | None,
        typer.Option(help="Default category forced for this sender: " + ", ".join(CATEGORIES)),
    ] = None,
    auto_process: Annotated[
        bool, typer.Option(help="Save this sender's messages without review.")
    ] = True,
    database_url: DatabaseUrlOption = None,
) -> None:
    """Add a sender rule."""

    raise typer.Exit(
        cmd_add_rule(
            sender_name,
            category=category,
            auto_process=auto_process,
            database_url=database_url,
        )
    )


@app.command("rules")
def rules_cmd(*, database_url: DatabaseUrlOption = None) -> None:
    """List sender rules."""

    raise typer.Exit(cmd_list_rules(database_url=database_url))


@app.command("delete-rule")
def delete_rule_cmd(rule_id: str, *, database_url: DatabaseUrlOption = None) -> None:
    """Delete a sender rule by id."""

    raise typer.Exit(cmd_delete_rule(rule_id, database_url=database_url))


@app.command("toggle-rule")
def toggle_rule_cmd(rule_id: str, *, database_url: DatabaseUrlOption = None) -> None:
    """Flip a sender rule's auto-process flag."""

    raise typer.Exit(cmd_toggle_rule(rule_id, database_url=database_url))


@app.command("export-csv")
def export_csv_cmd(
    output: Annotated[
        str | None, typer.Argument(help="Destination path (default transactions_<date>.csv).")
    ] = None,
    *,
    database_url: DatabaseUrlOption = None,
) -> None:
    """Export stored transactions to CSV."""

    raise typer.Exit(cmd_export_csv(output, database_url=database_url))


@app.command("summary")
def summary_cmd(
    *,
    period: Annotated[str, typer.Option(help="'month' or 'year'.")] = "month",
    database_url: DatabaseUrlOption = None,
) -> None:
    """Show income, expense and net totals for the current period."""

    raise typer.Exit(cmd_summary(period, database_url=database_url))


@app.command("clear-data")
def clear_data_cmd(
    *,
    yes: Annotated[bool, typer.Option("--yes", help="Confirm deleting everything.")] = False,
    database_url: DatabaseUrlOption = None,
) -> None:
    """Delete ALL transactions and sender rules."""

    if not yes:
        print("Error: refusing to clear data without --yes.", file=sys.stderr)
        raise typer.Exit(1)
    raise typer.Exit(cmd_clear_data(database_url=database_url))


@app.command("init-db")
def init_db_cmd(*, database_url: DatabaseUrlOption = None) -> None:
    """Create the ledger tables if they do not exist."""

    raise typer.Exit(cmd_init_db(database_url=database_url))


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    app()
