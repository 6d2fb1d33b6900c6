"""
Classifier that resolves a file's destination folder.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from .script_evaluator import NullScriptEvaluator, ScriptEvaluator

logger = logging.getLogger(__name__)


@dataclass
class FileEntry:
    """A file being classified."""

    path: Path
    extension: Optional[str]

    @classmethod
    def from_path(cls, file_path: Union[str, Path]) -> "FileEntry":
        path = Path(file_path)
        # Path.suffix keeps the dot and is empty for "README" or ".bashrc"
        extension = path.suffix[1:] if path.suffix else None
        return cls(path=path, extension=extension)

    @property
    def rule_key(self) -> Optional[str]:
        """Lookup key in the rule map, e.g. '.txt'."""
        if self.extension is None:
            return None
        return f".{self.extension}"


class Classifier:
    """Resolve destinations from static rules, then the sort script."""

    def __init__(self, script_evaluator: Optional[ScriptEvaluator] = None):
        self.script_evaluator = script_evaluator or NullScriptEvaluator()

    def classify(
        self, file_path: Union[str, Path], rules: Mapping[str, str]
    ) -> Optional[str]:
        """Determine the destination folder for a file.

        Args:
            file_path: Path to the file
            rules: Extension to folder mapping for the current pass

        Returns:
            Destination folder name, or None if the file should stay put
        """
        entry = FileEntry.from_path(file_path)

        key = entry.rule_key
        if key is not None and key in rules:
            return rules[key]

        destination = self.script_evaluator.evaluate(entry.path)
        if destination:
            logger.debug(f"Sort script matched {entry.path.name} -> {destination}")
        return destination
