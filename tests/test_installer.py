"""
Tests for the startup service installers.
"""

import subprocess
from pathlib import Path
from unittest.mock import Mock

import pytest

from file_sorter.errors import ServiceInstallError, UnsupportedPlatformError
from file_sorter.service.installer import (
    SystemdInstaller,
    WindowsTaskInstaller,
    get_installer,
)


class TestGetInstaller:
    def test_linux(self):
        assert isinstance(get_installer("linux"), SystemdInstaller)

    def test_windows(self):
        assert isinstance(get_installer("win32"), WindowsTaskInstaller)

    def test_unsupported(self):
        with pytest.raises(UnsupportedPlatformError, match="darwin"):
            get_installer("darwin")

    def test_options_passed_through(self, tmp_path):
        installer = get_installer("linux", service_name="sorter", unit_dir=tmp_path)

        assert installer.unit_path == tmp_path / "sorter.service"


class TestSystemdInstaller:
    """Test SystemdInstaller functionality."""

    @pytest.fixture
    def runner(self):
        return Mock()

    @pytest.fixture
    def installer(self, tmp_path, runner):
        return SystemdInstaller(
            unit_dir=tmp_path, python_executable="/usr/bin/python3", runner=runner
        )

    def test_build_command(self, installer, tmp_path):
        command = installer.build_command(tmp_path, 30)

        assert command == [
            "/usr/bin/python3",
            "-m",
            "file_sorter",
            "daemon",
            "--path",
            str(tmp_path.resolve()),
            "--interval",
            "30",
        ]

    def test_render_unit(self, installer, tmp_path):
        unit = installer.render_unit(tmp_path, 15)

        assert "Description=File Sorter Daemon" in unit
        assert (
            f"ExecStart=/usr/bin/python3 -m file_sorter daemon --path "
            f"{tmp_path.resolve()} --interval 15"
        ) in unit
        assert "Restart=always" in unit
        assert "WantedBy=default.target" in unit

    def test_install_writes_unit_and_starts(self, installer, runner, tmp_path):
        installer.install(tmp_path, 10)

        unit_file = tmp_path / "file_sorter.service"
        assert unit_file.exists()
        assert "--interval 10" in unit_file.read_text()
        assert [c.args[0] for c in runner.call_args_list] == [
            ["systemctl", "daemon-reload"],
            ["systemctl", "enable", "file_sorter"],
            ["systemctl", "start", "file_sorter"],
        ]

    def test_unit_write_failure(self, tmp_path, runner):
        installer = SystemdInstaller(unit_dir=tmp_path / "missing", runner=runner)

        with pytest.raises(ServiceInstallError, match="Failed to write service file"):
            installer.install(tmp_path, 10)

        runner.assert_not_called()

    def test_systemctl_failure(self, installer, runner, tmp_path):
        runner.side_effect = subprocess.CalledProcessError(1, ["systemctl"])

        with pytest.raises(ServiceInstallError, match="Command failed"):
            installer.install(tmp_path, 10)

    def test_systemctl_missing(self, installer, runner, tmp_path):
        runner.side_effect = FileNotFoundError("systemctl")

        with pytest.raises(ServiceInstallError, match="Cannot run systemctl"):
            installer.install(tmp_path, 10)


class TestWindowsTaskInstaller:
    """Test WindowsTaskInstaller functionality."""

    def test_install_creates_task(self, tmp_path):
        runner = Mock()
        installer = WindowsTaskInstaller(
            python_executable=r"C:\Python\python.exe", runner=runner
        )

        installer.install(tmp_path, 20)

        args = runner.call_args[0][0]
        assert args[:9] == [
            "schtasks",
            "/Create",
            "/TN",
            "FileSorterDaemon",
            "/SC",
            "ONSTART",
            "/RL",
            "HIGHEST",
            "/TR",
        ]
        assert args[9].startswith(r"C:\Python\python.exe -m file_sorter daemon --path")
        assert args[9].endswith("--interval 20")
        assert args[-1] == "/F"

    def test_task_name(self, tmp_path):
        installer = WindowsTaskInstaller(task_name="Sorter", runner=Mock())

        args = installer.build_task_args(tmp_path, 10)

        assert args[3] == "Sorter"

    def test_schtasks_failure(self, tmp_path):
        runner = Mock(side_effect=subprocess.CalledProcessError(1, ["schtasks"]))
        installer = WindowsTaskInstaller(runner=runner)

        with pytest.raises(ServiceInstallError):
            installer.install(tmp_path, 10)
