"""CLI entry point for VPS Init."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

import structlog
from rich.markup import escape

from vps_init import __version__
from vps_init.config import InitPlan, InitSettings
from vps_init.console import console, print_error, print_warning
from vps_init.exceptions import CommandExecutionError, InitError
from vps_init.logging_setup import close_logging, configure_logging, silence_logging
from vps_init.prompts import InputCollector
from vps_init.provisioner import Provisioner, preflight_checks
from vps_init.system_info import SystemInfo
from vps_init.utils.command import CommandExecutor

logger = structlog.get_logger()

EXIT_INTERRUPTED = 130


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="VPS Init - interactive hostname, swap, SSH and fail2ban bootstrap",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Answer the prompts
  sudo vps-init

Environment variables:
  VPS_LOG_FILE              - Audit log path
  VPS_SSH_PASSWORD_USER     - Account whose password is changed (default root)
  VPS_FAIL2BAN_PROTECT_DEFAULT_PORT - Keep port 22 in the jail (true/false)
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Path to the audit log (overrides env)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging and tracebacks",
    )

    return parser.parse_args(argv)


def confirm_plan(plan: InitPlan, collector: InputCollector) -> bool:
    """Show the plan and ask for the final go-ahead."""
    console.print("\n[cyan]About to apply:[/]")
    for line in plan.summary_lines():
        console.print(f"  - {escape(line)}")

    console.print()
    return collector.confirm("Apply the configuration above?")


def print_epilogue(plan: InitPlan, log_file: Optional[Path]) -> None:
    console.print("\n[green]🎉 Configuration finished![/]")
    if log_file is not None:
        console.print(f"Log file: {log_file}")
    if plan.ssh_port is not None:
        console.print(
            f"[bold red]⚠️  SSH port changed: make sure your firewall or security group "
            f"allows port {plan.ssh_port} and connect with the new port![/]"
        )


def run(args: argparse.Namespace, collector: Optional[InputCollector] = None) -> int:
    """Collect, confirm, apply and verify.

    Returns:
        Process exit code
    """
    settings = InitSettings.from_env()
    if args.log_file:
        settings.logging.file = args.log_file

    executor = CommandExecutor()
    system = SystemInfo(executor)
    preflight_checks(system)

    log_file = configure_logging(settings.logging, verbose=args.verbose)
    logger.info("run_start", version=__version__)

    collector = collector or InputCollector()
    plan = collector.collect()

    if plan.is_empty():
        print_warning("No operation selected, exiting.")
        return 0

    if not confirm_plan(plan, collector):
        console.print("Cancelled.")
        logger.info("run_cancelled")
        return 0

    Provisioner(plan, settings, executor=executor, system=system).run()
    print_epilogue(plan, log_file)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Main entry point for CLI.

    Raises:
        SystemExit: Always exits with appropriate code
    """
    args = parse_args(argv)
    silence_logging()

    try:
        code = run(args)

    except KeyboardInterrupt:
        logger.warning("interrupted")
        print_warning("\nInterrupted by user")
        code = EXIT_INTERRUPTED

    except InitError as e:
        context = {"error_type": type(e).__name__, "exit_code": e.exit_code}
        if isinstance(e, CommandExecutionError) and e.return_code is not None:
            context["return_code"] = e.return_code
        logger.error("run_failed", error=str(e), **context)
        print_error(f"{e} (exit code {e.exit_code})")
        code = e.exit_code

    except Exception as e:
        logger.exception("unexpected_error", error=str(e))
        print_error(f"Unexpected error: {e}")
        if args.verbose:
            console.print_exception()
        code = 1

    finally:
        close_logging()

    sys.exit(code)


if __name__ == "__main__":
    main()
