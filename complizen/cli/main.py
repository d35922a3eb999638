"""Command-line interface for Complizen."""

import json
import logging
from pathlib import Path

import click
from supabase import create_client

from complizen.errors import InvalidInput
from complizen.guardrails import parse_risk_items
from complizen.integrity import compute_digest, verify_document
from complizen.ledger import AuditLedger
from complizen.notifications import EmailDispatcher
from complizen.persistence import LedgerStore, ScheduleStore, SupabaseStore
from complizen.reporting import render_compliance_report, render_verification_report
from complizen.scheduling import ScheduleEngine
from complizen.scoring import build_report
from complizen.workers.config import (
    KV_TABLE,
    NOTIFICATION_API_KEY,
    NOTIFICATION_TIMEOUT,
    NOTIFICATION_URL,
    SUPABASE_KEY,
    SUPABASE_URL,
)
from complizen.workers.scheduler import SchedulerWorker


def _get_kv_store() -> SupabaseStore:
    """Create a SupabaseStore instance from Supabase config."""
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise click.ClickException(
            "Supabase not configured. Set SUPABASE_URL and SUPABASE_KEY environment variables."
        )
    client = create_client(SUPABASE_URL, SUPABASE_KEY)
    return SupabaseStore(client, table=KV_TABLE)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Audit integrity and compliance scoring tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def digest(file: Path):
    """Print the SHA-256 digest of FILE."""
    click.echo(compute_digest(file.read_bytes()))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("expected_hash")
@click.option("--verified-by", default="cli", help="Identity recorded on the result")
@click.option("--markdown", is_flag=True, help="Print a Markdown verification report")
def verify(file: Path, expected_hash: str, verified_by: str, markdown: bool):
    """Verify FILE against EXPECTED_HASH.

    Exits with status 1 when the digests do not match.
    """
    try:
        result = verify_document(file.name, file.read_bytes(), expected_hash, verified_by)
    except InvalidInput as e:
        raise click.BadParameter(str(e)) from e

    if markdown:
        click.echo(render_verification_report(result))
    else:
        click.echo(json.dumps(result.to_dict(), indent=2))
    if not result.integrity_verified:
        raise SystemExit(1)


@cli.command()
@click.argument("risks_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--document-id", default=None, help="Document id (defaults to the file stem)")
@click.option("--document-name", default=None, help="Document display name")
@click.option(
    "--regulation",
    "regulations",
    multiple=True,
    help="Regulation to always include in the per-regulation scores",
)
@click.option("--strict", is_flag=True, help="Reject unknown severities")
@click.option("--markdown", is_flag=True, help="Print a Markdown report")
def score(
    risks_json: Path,
    document_id: str | None,
    document_name: str | None,
    regulations: tuple[str, ...],
    strict: bool,
    markdown: bool,
):
    """Score the risk list in RISKS_JSON."""
    try:
        raw = json.loads(risks_json.read_text(encoding="utf-8"))
        if isinstance(raw, dict):
            raw = raw.get("risks", [])
        risks = parse_risk_items(raw, strict=strict)
    except (json.JSONDecodeError, InvalidInput) as e:
        raise click.ClickException(f"Invalid risk file: {e}") from e

    report = build_report(
        document_id=document_id or risks_json.stem,
        document_name=document_name or risks_json.name,
        risks=risks,
        regulations=regulations,
    )
    if markdown:
        click.echo(render_compliance_report(report))
    else:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))


@cli.command()
@click.option("--once", is_flag=True, help="Run a single tick and exit")
def scheduler(once: bool):
    """Run the scheduler worker.

    The scheduler ticks every stored schedule and sends email
    notifications for the ones that are due.
    """
    kv = _get_kv_store()
    engine = ScheduleEngine(ScheduleStore(kv), ledger=AuditLedger(LedgerStore(kv)))
    dispatcher = EmailDispatcher(
        url=NOTIFICATION_URL,
        api_key=NOTIFICATION_API_KEY,
        timeout=NOTIFICATION_TIMEOUT,
    )
    worker = SchedulerWorker(engine, dispatcher)
    if once:
        click.echo(f"Dispatched {worker.run_once()} scheduled scans")
        return
    worker.run_loop()


if __name__ == "__main__":
    cli()
