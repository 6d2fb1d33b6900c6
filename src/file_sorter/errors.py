"""
Error types raised across the file sorting system.
"""

from pathlib import Path
from typing import Optional, Union


class FileSorterError(Exception):
    """Base class for all file sorter errors."""


class InvalidDirectoryError(FileSorterError):
    """The sort target does not exist or is not a directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = str(directory)
        super().__init__(f"Not a directory: {self.directory}")


class ConfigLoadError(FileSorterError):
    """A rules or script artifact could not be loaded."""


class FileSystemError(FileSorterError):
    """A per-file move or directory creation failed."""

    def __init__(
        self,
        message: str,
        source: Optional[Union[str, Path]] = None,
        target: Optional[Union[str, Path]] = None,
    ):
        self.source = str(source) if source is not None else None
        self.target = str(target) if target is not None else None
        super().__init__(message)


class DestinationConflictError(FileSystemError):
    """A file with the same name already exists at the destination."""


class InvalidDestinationError(FileSystemError):
    """The destination name is not a single safe folder name."""


class ServiceInstallError(FileSorterError):
    """Installing the startup service failed."""


class UnsupportedPlatformError(ServiceInstallError):
    """No service installer exists for the current platform."""
