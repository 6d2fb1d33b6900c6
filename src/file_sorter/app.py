"""
Main application controller for the file sorter.
Wires configuration into the sorting components and exposes the CLI.
"""

import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Any, Dict, Optional

import click

from file_sorter.errors import FileSorterError, ServiceInstallError
from file_sorter.file_access.mover import FileMover
from file_sorter.organization_logic.classifier import Classifier
from file_sorter.organization_logic.rule_source import RuleSource
from file_sorter.organization_logic.script_evaluator import create_script_evaluator
from file_sorter.organization_logic.sorter import Sorter, SortResult
from file_sorter.service.installer import ServiceInstaller, get_installer
from file_sorter.service.scheduler import Scheduler
from file_sorter.utils.config_manager import ConfigManager
from file_sorter.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PASS_FAILED = 1
EXIT_FILES_FAILED = 2


class FileSorterApp:
    """Application controller that builds the sorter from configuration."""

    def __init__(
        self,
        config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the application with configuration.

        Args:
            config_file: Path to configuration file
            overrides: Dotted-path configuration overrides from the command line
        """
        self.config_manager = ConfigManager(
            config_file=Path(config_file) if config_file else None,
            overrides=overrides,
        )
        self.config = self.config_manager.config

    def setup_logging(self, verbose: bool = False):
        """Configure logging based on application settings."""
        level = "DEBUG" if verbose else self.config_manager.get("logging.level", "INFO")
        setup_logging(
            log_level=level,
            log_file=self.config_manager.get("logging.file"),
            fmt=self.config_manager.get("logging.format"),
        )

    def create_rule_source(self) -> RuleSource:
        return RuleSource(self.config_manager.get("rules.rules_file"))

    def create_sorter(self) -> Sorter:
        """Build a sorter from the current configuration."""
        script_evaluator = create_script_evaluator(
            script_file=self.config_manager.get("rules.script_file"),
            enabled=self.config_manager.get("rules.enable_scripts", True),
        )
        return Sorter(
            rule_source=self.create_rule_source(),
            classifier=Classifier(script_evaluator),
            mover=FileMover(
                dry_run=self.config_manager.get("sorting.dry_run", False),
                conflict_strategy=self.config_manager.get(
                    "sorting.conflict_strategy", "fail"
                ),
            ),
        )

    def create_installer(self, platform: Optional[str] = None) -> ServiceInstaller:
        return get_installer(
            platform=platform,
            service_name=self.config_manager.get("service.name"),
            unit_dir=self.config_manager.get("service.unit_dir"),
            task_name=self.config_manager.get("service.task_name"),
        )

    def sort(self, directory: str) -> SortResult:
        """Run a single sort pass."""
        return self.create_sorter().sort(directory)

    def run_daemon(
        self,
        directory: str,
        interval: float,
        stop_event: Optional[threading.Event] = None,
        max_passes: Optional[int] = None,
    ) -> int:
        """Sort the directory on an interval until stopped."""
        scheduler = Scheduler(self.create_sorter(), stop_event=stop_event)
        return scheduler.run(directory, interval, max_passes=max_passes)

    def install(self, directory: str, interval: int, platform: Optional[str] = None):
        """Install the daemon as a startup service."""
        self.create_installer(platform).install(directory, interval)


def _install_signal_handlers(stop_event: threading.Event):
    """Stop the daemon loop on SIGINT/SIGTERM."""

    def signal_handler(signum, frame):
        logger.info("Received shutdown signal - stopping after current pass")
        stop_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


@click.group()
@click.option("--config", "config_file", type=click.Path(exists=True), default=None,
              help="Path to configuration file")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
              default=None, help="Logging level")
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx, config_file: Optional[str], log_level: Optional[str], verbose: bool):
    """Sort files into folders by extension or Lua script rules."""
    try:
        app = FileSorterApp(
            config_file=config_file, overrides={"logging.level": log_level}
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    app.setup_logging(verbose=verbose)
    ctx.obj = app


@main.command()
@click.option("--path", "-p", required=True, help="Directory to sort")
@click.option("--dry-run", is_flag=True, help="Preview moves without touching files")
@click.pass_obj
def sort(app: FileSorterApp, path: str, dry_run: bool):
    """Sort files based on the configured rules."""
    if dry_run:
        app.config_manager.set("sorting.dry_run", True)

    try:
        result = app.sort(path)
    except FileSorterError as e:
        click.echo(f"Error sorting files: {e}", err=True)
        sys.exit(EXIT_PASS_FAILED)
    except Exception as e:
        logger.exception("Sort pass failed")
        click.echo(f"Error sorting files: {e}", err=True)
        sys.exit(EXIT_PASS_FAILED)

    prefix = "Would move" if dry_run else "Moved"
    for source, target in result.moved:
        click.echo(f"{prefix} {source} -> {target}")
    for source, error in result.failed:
        click.echo(f"Failed {source}: {error}", err=True)

    click.echo(
        f"\n{result.moved_count} moved, {len(result.skipped)} untouched, "
        f"{result.failed_count} failed"
    )
    sys.exit(EXIT_FILES_FAILED if result.has_failures else EXIT_OK)


@main.command()
@click.option("--path", "-p", required=True, help="Directory to watch")
@click.option("--interval", "-i", type=click.IntRange(min=1), default=None,
              help="Seconds between passes (default: 10)")
@click.pass_obj
def daemon(app: FileSorterApp, path: str, interval: Optional[int]):
    """Run the file sorter as a background process."""
    if interval is None:
        interval = app.config_manager.get("daemon.interval", 10)

    stop_event = threading.Event()
    _install_signal_handlers(stop_event)
    app.run_daemon(path, interval, stop_event=stop_event)


@main.command()
@click.option("--path", "-p", required=True, help="Directory to watch")
@click.option("--interval", "-i", type=click.IntRange(min=1), default=10,
              show_default=True, help="Seconds between passes")
@click.pass_obj
def install(app: FileSorterApp, path: str, interval: int):
    """Install the daemon as a system service."""
    try:
        app.install(path, interval)
    except ServiceInstallError as e:
        click.echo(f"Failed to install service: {e}", err=True)
        sys.exit(EXIT_PASS_FAILED)

    click.echo(f"Installed file sorter service for {Path(path).resolve()}")


@main.command()
@click.pass_obj
def rules(app: FileSorterApp):
    """Show the effective extension rules."""
    rule_source = app.create_rule_source()
    rule_map = rule_source.load()

    source = rule_source.loaded_from or "defaults"
    click.echo(f"Rules ({source}):")
    for extension, destination in sorted(rule_map.items()):
        click.echo(f"  {extension} -> {destination}")

    script_file = Path(app.config_manager.get("rules.script_file"))
    if not app.config_manager.get("rules.enable_scripts", True):
        click.echo("Sort script: disabled")
    elif script_file.exists():
        click.echo(f"Sort script: {script_file}")
    else:
        click.echo("Sort script: none")


if __name__ == "__main__":
    main()
