"""
Background scheduling and startup service installation.
"""

from .scheduler import Scheduler
from .installer import (
    ServiceInstaller,
    SystemdInstaller,
    WindowsTaskInstaller,
    get_installer,
)

__all__ = [
    "Scheduler",
    "ServiceInstaller",
    "SystemdInstaller",
    "WindowsTaskInstaller",
    "get_installer",
]
