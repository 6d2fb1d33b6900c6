"""
Sorter that runs one pass over a directory.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import List, Optional, Tuple, Union

from file_sorter.errors import FileSystemError, InvalidDirectoryError
from file_sorter.file_access.mover import FileMover

from .classifier import Classifier
from .rule_source import RuleSource

logger = logging.getLogger(__name__)


@dataclass
class SortResult:
    """Outcome of one sort pass."""

    directory: str
    moved: List[Tuple[str, str]] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def moved_count(self) -> int:
        return len(self.moved)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)


class Sorter:
    """Classify and move the top-level files of a directory."""

    def __init__(
        self,
        rule_source: Optional[RuleSource] = None,
        classifier: Optional[Classifier] = None,
        mover: Optional[FileMover] = None,
    ):
        self.rule_source = rule_source or RuleSource()
        self.classifier = classifier or Classifier()
        self.mover = mover or FileMover()

    def sort(self, directory: Union[str, Path]) -> SortResult:
        """Run one pass over a directory.

        Subdirectories are not descended into or moved. A failure to
        classify or move one file is logged and recorded, and the pass
        carries on.

        Args:
            directory: Directory to sort

        Returns:
            SortResult for the pass

        Raises:
            InvalidDirectoryError: If directory is not an existing directory
            FileSystemError: If the directory cannot be listed
        """
        root = Path(directory)
        if not root.is_dir():
            raise InvalidDirectoryError(root)

        rules = MappingProxyType(self.rule_source.load())
        result = SortResult(directory=str(root))

        logger.info(f"Sorting directory: {root}")

        for entry in self._list_files(root):
            try:
                destination = self.classifier.classify(entry, rules)
                if not destination:
                    result.skipped.append(str(entry))
                    continue

                target = self.mover.move(entry, root, destination)
            except FileSystemError as e:
                logger.error(f"Could not sort {entry.name}: {e}")
                result.failed.append((str(entry), str(e)))
                continue
            except Exception as e:
                logger.exception(f"Unexpected error sorting {entry.name}")
                result.failed.append((str(entry), f"Unexpected error: {e}"))
                continue

            result.moved.append((str(entry), str(target)))

        logger.info(
            f"Finished {root}: {result.moved_count} moved, "
            f"{len(result.skipped)} untouched, {result.failed_count} failed"
        )
        return result

    def _list_files(self, root: Path) -> List[Path]:
        """List regular files directly inside root."""
        try:
            entries = sorted(root.iterdir())
        except OSError as e:
            raise FileSystemError(f"Cannot list {root}: {e}", source=root) from e

        # Symlinks are left alone even when they point at files
        return [p for p in entries if p.is_file() and not p.is_symlink()]
