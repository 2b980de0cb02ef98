"""CLI commands for endpoint discovery."""

import json
import logging
import sys

import click

from src.feed.models import CandidateRecord
from src.fetch.metrics import FetchMetrics
from src.history import DEFAULT_HISTORY_PATH, HostnameHistory
from src.observability.logging import configure_logging
from src.pipeline import CycleResult, CycleStatus, DiscoveryPipeline
from src.ranker.constants import DEFAULT_TOP_K
from src.ranker.metrics import RankerMetrics
from src.settings import AppSettings, get_settings
from src.update import UpdateChecker


def _setup_logging(json_logs: bool, verbose: bool) -> None:
    """Configure logging for a CLI invocation."""
    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        json_format=json_logs,
    )


def _run_cycle(ctx: click.Context) -> CycleResult:
    """Run one discovery cycle in the background and wait for it."""
    result = DiscoveryPipeline(ctx.obj["settings"]).submit().result()
    if ctx.obj.get("verbose"):
        stats = {
            "fetch": FetchMetrics.get_instance().to_dict(),
            "ranker": RankerMetrics.get_instance().to_dict(),
        }
        click.echo(json.dumps(stats, indent=2), err=True)
    return result


def _candidate_row(record: CandidateRecord, score: int) -> dict[str, object]:
    return {
        "host": record.host_identifier,
        "address": record.address,
        "region": record.region_code,
        "latency_ms": record.latency,
        "throughput_mbps": round(record.throughput / 1_000_000, 2),
        "sessions": record.load,
        "score": score,
    }


def _exit_on_failure(result: CycleResult) -> None:
    """Report a failed or empty cycle and exit non-zero."""
    if result.status == CycleStatus.FETCH_FAILED:
        message = result.error.message if result.error else "unknown error"
        click.echo(f"Could not fetch the candidate feed: {message}", err=True)
        sys.exit(2)
    if result.status == CycleStatus.EMPTY:
        click.echo("No servers found.", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON format for logs (default: false).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.pass_context
def cli(ctx: click.Context, json_logs: bool, verbose: bool) -> None:
    """Discover, score and rank candidate endpoints."""
    _setup_logging(json_logs, verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = get_settings()


@cli.command()
@click.option(
    "--top",
    "top_k",
    type=click.IntRange(min=1),
    default=DEFAULT_TOP_K,
    show_default=True,
    help="Number of candidates to list.",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@click.pass_context
def rank(ctx: click.Context, top_k: int, as_json: bool) -> None:
    """Fetch the feed and list the best candidates."""
    result = _run_cycle(ctx)
    _exit_on_failure(result)

    ranked = result.ranked
    rows = [_candidate_row(r, ranked.percentile_score(r)) for r in ranked.top_k(top_k)]

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    click.echo(f"{len(ranked)} eligible candidates (showing {len(rows)}):")
    for position, row in enumerate(rows, start=1):
        click.echo(
            f"  {position:>2}. {row['host']:<32} {row['address']:<15} "
            f"{row['region']:<3} {row['latency_ms']:>5} ms "
            f"{row['throughput_mbps']:>8} Mbps {row['sessions']:>4} sessions "
            f"score={row['score']}"
        )


@cli.command()
@click.pass_context
def best(ctx: click.Context) -> None:
    """Print the host and address of the best candidate."""
    result = _run_cycle(ctx)
    _exit_on_failure(result)

    record = result.ranked.best()
    if record is None:
        click.echo("No servers found.", err=True)
        sys.exit(1)
    click.echo(f"{record.host_identifier} {record.address}")


@cli.command("check-update")
@click.option(
    "--current-version",
    required=True,
    help="Version of the running installation (e.g. 1.2.3).",
)
@click.pass_context
def check_update(ctx: click.Context, current_version: str) -> None:
    """Check whether a newer release is published."""
    settings: AppSettings = ctx.obj["settings"]
    result = UpdateChecker(settings.update_config()).check(current_version)

    if result.error:
        click.echo(f"Update check failed: {result.error}", err=True)
        sys.exit(2)

    if result.update_available:
        click.echo(f"Update available: {result.current_version} -> {result.latest_version}")
        if result.download_url:
            click.echo(f"  {result.download_url}")
    else:
        click.echo(f"Up to date ({result.current_version}).")


@cli.command()
@click.option("--add", "hostname", default=None, help="Record a manually entered hostname.")
@click.option("--clear", is_flag=True, help="Forget every recorded hostname.")
@click.pass_context
def history(ctx: click.Context, hostname: str | None, clear: bool) -> None:
    """Show or edit the manually entered hostname history."""
    settings: AppSettings = ctx.obj["settings"]
    host_history = HostnameHistory(settings.history_path or DEFAULT_HISTORY_PATH)

    if clear:
        host_history.clear()
    if hostname is not None:
        host_history.add(hostname)

    for entry in host_history.entries():
        click.echo(entry)


def main() -> None:
    """Console script entry point."""
    cli(obj={})
