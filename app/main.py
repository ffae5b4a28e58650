"""Command-line entry point for the SSPR audit and role-assignment exports."""

import argparse
import sys
from typing import Callable, Optional, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from infrastructure.clients.graph import GraphClients, GraphError, GraphRequestError
from infrastructure.configuration import Settings, get_settings
from infrastructure.logging import (
    bind_run_context,
    configure_logging,
    get_module_logger,
)
from modules.audit_export import (
    ConfigurationError,
    ExportWriteError,
    RunSummary,
    run_audit_export,
    run_role_export,
)
from modules.audit_export.pipeline import ALL_FORMATS

logger = get_module_logger()

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIGURATION = 2

COMMANDS = ("audit", "roles", "all")
FORMAT_CHOICES = {"csv": ("csv",), "json": ("json",), "both": ALL_FORMATS}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sspr-audit-export",
        description=(
            "Export self-service password reset audit events and directory "
            "role assignments from Microsoft Entra ID to CSV/JSON."
        ),
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        default="all",
        help="which export to run (default: all)",
    )
    parser.add_argument(
        "--format",
        choices=sorted(FORMAT_CHOICES),
        default="both",
        help="audit export file format(s) (default: both)",
    )
    parser.add_argument(
        "--output-dir",
        help="directory for export files (default: EXPORT_OUTPUT_DIR or .)",
    )
    parser.add_argument(
        "--log-level",
        help="log level override (default: LOG_LEVEL or INFO)",
    )
    return parser


def check_configuration(settings: Settings) -> None:
    """Raise ConfigurationError when Graph credentials are missing."""
    if not settings.graph.is_configured:
        raise ConfigurationError(
            "Missing required configuration: "
            + ", ".join(settings.graph.missing_credentials)
        )


def _log_summary(summary: RunSummary) -> None:
    logger.info(
        "export_summary",
        profile=summary.profile,
        rows_written=summary.rows_written,
        outputs=summary.outputs,
        status_counts=summary.status_counts,
    )
    for problem in summary.problems:
        logger.warning("export_row_problem", profile=summary.profile, problem=problem)


def run_exports(
    command: str,
    settings: Settings,
    clients: GraphClients,
    formats: Sequence[str] = ALL_FORMATS,
) -> list[RunSummary]:
    """Run the selected exports one after the other, audit first."""
    summaries = []
    if command in ("audit", "all"):
        summaries.append(
            run_audit_export(clients, settings.audit_export, formats=formats)
        )
    if command in ("roles", "all"):
        summaries.append(run_role_export(clients, settings.audit_export))
    return summaries


def main(
    argv: Optional[Sequence[str]] = None,
    settings_factory: Callable[[], Settings] = get_settings,
    clients_factory: Callable[..., GraphClients] = GraphClients,
) -> int:
    """Run the CLI and return the process exit status."""
    load_dotenv(".env.local")
    load_dotenv()

    args = build_parser().parse_args(argv)

    try:
        settings = settings_factory()
    except ValidationError as e:
        configure_logging(log_level=args.log_level or "INFO", is_production=False)
        logger.error("configuration_invalid", error=str(e))
        return EXIT_CONFIGURATION

    configure_logging(
        log_level=args.log_level or settings.LOG_LEVEL,
        is_production=settings.is_production,
    )

    if args.output_dir:
        settings = settings.model_copy(
            update={
                "audit_export": settings.audit_export.model_copy(
                    update={"EXPORT_OUTPUT_DIR": args.output_dir}
                )
            }
        )

    with bind_run_context(command=args.command):
        try:
            check_configuration(settings)
        except ConfigurationError as e:
            logger.error("configuration_error", error=str(e))
            return EXIT_CONFIGURATION

        clients = clients_factory(settings.graph)
        try:
            clients.authenticate()
            summaries = run_exports(
                args.command, settings, clients, FORMAT_CHOICES[args.format]
            )
        except GraphRequestError as e:
            logger.error(
                "graph_request_failed",
                operation=e.operation,
                identifier=e.identifier,
                error_code=e.result.error_code,
                error=str(e),
            )
            return EXIT_FAILURE
        except GraphError as e:
            logger.error("graph_authentication_failed", error=str(e))
            return EXIT_FAILURE
        except ExportWriteError as e:
            logger.error("export_write_failed", path=e.path, error=str(e))
            return EXIT_FAILURE
        finally:
            clients.close()

        for summary in summaries:
            _log_summary(summary)

    return EXIT_OK


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
