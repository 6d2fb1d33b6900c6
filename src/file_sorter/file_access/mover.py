"""
File mover that relocates files into destination subdirectories.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional, Union

from file_sorter.errors import (
    DestinationConflictError,
    FileSystemError,
    InvalidDestinationError,
)

logger = logging.getLogger(__name__)


class FileMover:
    """Move files into named subdirectories of the scanned directory."""

    CONFLICT_STRATEGIES = ("fail", "rename")
    MAX_RENAME_ATTEMPTS = 1000

    def __init__(self, dry_run: bool = False, conflict_strategy: str = "fail"):
        """Initialize file mover.

        Args:
            dry_run: Whether to log moves without touching the filesystem
            conflict_strategy: How to handle a same-named file at the destination
                - "fail": Leave the source in place and raise DestinationConflictError
                - "rename": Add a numeric suffix to the moved file
        """
        if conflict_strategy not in self.CONFLICT_STRATEGIES:
            raise ValueError(f"Unknown conflict strategy: {conflict_strategy}")

        self.dry_run = dry_run
        self.conflict_strategy = conflict_strategy

    def move(
        self,
        file_path: Union[str, Path],
        directory: Union[str, Path],
        destination: str,
    ) -> Path:
        """Move a file into directory/destination.

        Args:
            file_path: File to move
            directory: Directory being sorted
            destination: Folder name under directory

        Returns:
            Final path of the moved file

        Raises:
            FileSystemError: If the destination is unsafe, the target directory
                cannot be created, or the file cannot be moved
        """
        source = Path(file_path)
        target_dir = Path(directory) / validate_destination(destination, source)
        target = target_dir / source.name

        if self.dry_run:
            logger.info(f"[DRY RUN] Would move: {source} -> {target}")
            return target

        self._create_directory(target_dir, source)

        final_target = self._resolve_conflict(source, target)

        try:
            shutil.move(str(source), str(final_target))
        except (OSError, ValueError, shutil.Error) as e:
            raise FileSystemError(
                f"Failed to move {source} to {final_target}: {e}",
                source=source,
                target=final_target,
            ) from e

        logger.info(f"Moved: {source} -> {final_target}")
        return final_target

    def _create_directory(self, directory: Path, source: Path):
        """Create the target directory if needed."""
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as e:
            raise FileSystemError(
                f"Failed to create directory {directory}: {e}",
                source=source,
                target=directory,
            ) from e

    def _resolve_conflict(self, source: Path, target: Path) -> Path:
        """Apply the conflict strategy when the target name is taken."""
        if not target.exists():
            return target

        if self.conflict_strategy == "fail":
            raise DestinationConflictError(
                f"Destination already exists: {target}", source=source, target=target
            )

        base = target.stem
        ext = target.suffix
        for counter in range(1, self.MAX_RENAME_ATTEMPTS + 1):
            new_target = target.parent / f"{base}_{counter}{ext}"
            if not new_target.exists():
                logger.info(f"Resolved conflict: {target} -> {new_target}")
                return new_target

        raise DestinationConflictError(
            f"Too many naming conflicts for {target}", source=source, target=target
        )


def validate_destination(destination: str, source: Optional[Path] = None) -> str:
    """Check that a destination is a single folder name.

    Raises:
        InvalidDestinationError: For empty names, '.', '..', absolute paths
            or names containing a path separator or NUL
    """
    if not isinstance(destination, str) or not destination.strip():
        raise InvalidDestinationError(
            f"Empty destination for {source}", source=source
        )

    name = destination.strip()
    if (
        "/" in name
        or "\\" in name
        or "\x00" in name
        or name in (".", "..")
        or Path(name).is_absolute()
    ):
        raise InvalidDestinationError(
            f"Unsafe destination {destination!r} for {source}",
            source=source,
            target=destination,
        )

    return name
