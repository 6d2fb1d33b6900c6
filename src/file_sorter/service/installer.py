"""
Startup service installers.

Each installer registers `python -m file_sorter daemon` with the platform's
service manager so sorting resumes after a reboot.
"""

import getpass
import logging
import os
import shlex
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional, Union

from file_sorter.errors import ServiceInstallError, UnsupportedPlatformError

logger = logging.getLogger(__name__)


def _run(args: List[str]):
    return subprocess.run(args, check=True, capture_output=True, text=True)


class ServiceInstaller(ABC):
    """Install the sorting daemon as a startup service."""

    def __init__(
        self,
        python_executable: Optional[str] = None,
        runner: Optional[Callable[[List[str]], object]] = None,
    ):
        """Initialize installer.

        Args:
            python_executable: Interpreter for the daemon (defaults to sys.executable)
            runner: Callable used to run service manager commands
        """
        self.python_executable = python_executable or sys.executable
        self.runner = runner or _run

    def build_command(self, directory: Union[str, Path], interval: int) -> List[str]:
        """Command line that starts the daemon."""
        return [
            self.python_executable,
            "-m",
            "file_sorter",
            "daemon",
            "--path",
            str(Path(directory).resolve()),
            "--interval",
            str(interval),
        ]

    @abstractmethod
    def install(self, directory: Union[str, Path], interval: int):
        """Register and start the service."""

    def _execute(self, args: List[str]):
        logger.info(f"Running: {' '.join(args)}")
        try:
            self.runner(args)
        except subprocess.CalledProcessError as e:
            raise ServiceInstallError(
                f"Command failed ({e.returncode}): {' '.join(args)}"
            ) from e
        except OSError as e:
            raise ServiceInstallError(f"Cannot run {args[0]}: {e}") from e


class SystemdInstaller(ServiceInstaller):
    """Install a systemd unit on Linux."""

    UNIT_TEMPLATE = """[Unit]
Description=File Sorter Daemon
After=network.target

[Service]
ExecStart={exec_start}
Restart=always
User={user}
WorkingDirectory={working_directory}

[Install]
WantedBy=default.target
"""

    def __init__(
        self,
        service_name: str = "file_sorter",
        unit_dir: Union[str, Path] = "/etc/systemd/system",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.service_name = service_name
        self.unit_dir = Path(unit_dir)

    @property
    def unit_path(self) -> Path:
        return self.unit_dir / f"{self.service_name}.service"

    def render_unit(self, directory: Union[str, Path], interval: int) -> str:
        """Render the unit file contents."""
        return self.UNIT_TEMPLATE.format(
            exec_start=shlex.join(self.build_command(directory, interval)),
            user=getpass.getuser(),
            working_directory=os.getcwd(),
        )

    def install(self, directory: Union[str, Path], interval: int):
        unit = self.render_unit(directory, interval)

        try:
            self.unit_path.write_text(unit)
        except OSError as e:
            raise ServiceInstallError(
                f"Failed to write service file {self.unit_path}: {e}"
            ) from e
        logger.info(f"Wrote service file: {self.unit_path}")

        self._execute(["systemctl", "daemon-reload"])
        self._execute(["systemctl", "enable", self.service_name])
        self._execute(["systemctl", "start", self.service_name])

        logger.info(f"Service {self.service_name} installed and started")


class WindowsTaskInstaller(ServiceInstaller):
    """Register a scheduled task that runs at startup on Windows."""

    def __init__(self, task_name: str = "FileSorterDaemon", **kwargs):
        super().__init__(**kwargs)
        self.task_name = task_name

    def build_task_args(self, directory: Union[str, Path], interval: int) -> List[str]:
        command = subprocess.list2cmdline(self.build_command(directory, interval))
        return [
            "schtasks",
            "/Create",
            "/TN",
            self.task_name,
            "/SC",
            "ONSTART",
            "/RL",
            "HIGHEST",
            "/TR",
            command,
            "/F",
        ]

    def install(self, directory: Union[str, Path], interval: int):
        self._execute(self.build_task_args(directory, interval))
        logger.info(f"Scheduled task {self.task_name} created")


def get_installer(
    platform: Optional[str] = None,
    service_name: str = "file_sorter",
    unit_dir: Union[str, Path] = "/etc/systemd/system",
    task_name: str = "FileSorterDaemon",
    **kwargs,
) -> ServiceInstaller:
    """Select the installer for a platform (defaults to sys.platform).

    Raises:
        UnsupportedPlatformError: If the platform has no installer
    """
    platform = platform or sys.platform

    if platform.startswith("linux"):
        return SystemdInstaller(service_name=service_name, unit_dir=unit_dir, **kwargs)
    if platform.startswith("win"):
        return WindowsTaskInstaller(task_name=task_name, **kwargs)

    raise UnsupportedPlatformError(f"Service installation not supported on {platform}")
