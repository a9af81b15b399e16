"""pulsedoctor entry point.

Runs one audit and prints a report (default), or starts the API server.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pulsedoctor import __version__
from pulsedoctor.audit.engine import AuditEngine
from pulsedoctor.audit.errors import RegistryError
from pulsedoctor.audit.models import AuditResult, ModuleStatus
from pulsedoctor.audit.reporter import HealthReporter
from pulsedoctor.config import Settings
from pulsedoctor.logging_setup import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNHEALTHY = 1
EXIT_REGISTRY_ERROR = 2

_STATUS_STYLES = {
    ModuleStatus.WORKING: "green",
    ModuleStatus.PARTIALLY_WORKING: "yellow",
    ModuleStatus.BROKEN: "red",
    ModuleStatus.MISSING: "bright_black",
    ModuleStatus.INCOMPLETE: "dark_orange",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pulsedoctor",
        description="Self-diagnostic audit of the CamerPulse platform modules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pulsedoctor                                   Audit http://127.0.0.1:8080
  pulsedoctor --base-url https://staging.app    Audit another deployment
  pulsedoctor --seed 7 --no-noise --json        Reproducible run, JSON output
  pulsedoctor --export report.json              Save the full report
  pulsedoctor serve --port 8890                 Start the audit API
""",
    )
    parser.add_argument("command", nargs="?", choices=["audit", "serve"], default="audit")
    parser.add_argument("--base-url", help="Origin the module routes are probed on")
    parser.add_argument("--registry", type=Path, help="JSON module catalog to audit")
    parser.add_argument("--seed", type=int, help="Seed for simulated outcomes")
    parser.add_argument("--timeout", type=float, help="Route probe timeout in seconds")
    parser.add_argument(
        "--no-noise", action="store_true", help="Disable random minor-issue flagging"
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--export", type=Path, help="Write the full report to this file")
    parser.add_argument("--host", help="API host (serve)")
    parser.add_argument("--port", type=int, help="API port (serve)")
    parser.add_argument("--log-level", help="Logging level (default INFO)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings.load(
        base_url=args.base_url,
        registry_path=args.registry,
        seed=args.seed,
        probe_timeout=args.timeout,
        noise_probability=0.0 if args.no_noise else None,
        api_host=args.host,
        api_port=args.port,
        log_level=args.log_level,
    )


def render_result(result: AuditResult, console: Console) -> None:
    reporter = HealthReporter(result)

    table = Table(title="Module audit", show_lines=False)
    table.add_column("Module")
    table.add_column("Category")
    table.add_column("Priority")
    table.add_column("Status")
    table.add_column("Issues")

    for item in result.modules:
        style = _STATUS_STYLES.get(item.status, "")
        status = item.status.value
        if item.repair_successful:
            status += " (repaired)"
        table.add_row(
            escape(item.name),
            item.category.value,
            item.priority.value,
            f"[{style}]{status}[/{style}]" if style else status,
            escape("; ".join(item.issues)),
        )

    console.print(table)
    console.print(f"Overall health: [bold]{reporter.overall_health_percent()}%[/bold]")
    console.print(reporter.headline())


async def run_audit(settings: Settings, console: Console, as_json: bool, export: Path | None) -> int:
    engine = AuditEngine(settings=settings)
    try:
        result = await engine.run()
    except RegistryError as e:
        console.print(f"[red]Audit failed:[/red] {escape(str(e))}")
        return EXIT_REGISTRY_ERROR

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        render_result(result, console)

    if export is not None:
        report = engine.reporter.export_report()
        try:
            export.write_text(json.dumps(report, indent=2), encoding="utf-8")
        except OSError as e:
            console.print(
                f"[red]Could not write report to {escape(str(export))}:[/red] {escape(str(e))}"
            )
        else:
            logger.info("Report written to %s", export)

    unhealthy = result.broken + result.missing
    return EXIT_UNHEALTHY if unhealthy else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    setup_logging(level=settings.log_level)

    if args.command == "serve":
        from pulsedoctor.api.serve import run_api_server
        from pulsedoctor.audit.engine import get_audit_engine

        get_audit_engine(settings)
        run_api_server(host=settings.api_host, port=settings.api_port)
        return EXIT_OK

    console = Console()
    return asyncio.run(run_audit(settings, console, args.json, args.export))


if __name__ == "__main__":
    sys.exit(main())
