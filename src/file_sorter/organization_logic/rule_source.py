"""
Rule source for the static extension -> folder mapping.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from file_sorter.errors import ConfigLoadError

logger = logging.getLogger(__name__)

RuleMap = Dict[str, str]


class RuleSource:
    """Load extension rules from a rules file, falling back to defaults."""

    DEFAULT_RULES = {
        ".txt": "TextFiles",
        ".jpg": "Images",
        ".png": "Images",
        ".rs": "RustCode",
    }

    def __init__(self, rules_file: Union[str, Path] = "rules.json"):
        """Initialize rule source.

        Args:
            rules_file: Path to the rules file, relative to the working directory
        """
        self.rules_file = Path(rules_file)
        self.loaded_from: Optional[Path] = None

    @classmethod
    def default_rules(cls) -> RuleMap:
        """Return a fresh copy of the built-in rules."""
        return dict(cls.DEFAULT_RULES)

    def load(self) -> RuleMap:
        """Load the rule map.

        Never raises: any problem with the rules file results in the
        default rules being returned.

        Returns:
            Mapping of extension (with leading dot) to destination folder
        """
        self.loaded_from = None

        if not self.rules_file.exists():
            logger.debug(f"No rules file at {self.rules_file}, using default rules")
            return self.default_rules()

        try:
            rules = self._read_rules_file()
        except ConfigLoadError as e:
            logger.warning(f"Ignoring rules file {self.rules_file}: {e}")
            return self.default_rules()

        self.loaded_from = self.rules_file
        logger.debug(f"Loaded {len(rules)} rules from {self.rules_file}")
        return rules

    def _read_rules_file(self) -> RuleMap:
        """Read and validate the rules file."""
        try:
            with open(self.rules_file, "r", encoding="utf-8") as f:
                if self.rules_file.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(f"cannot read file: {e}") from e
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigLoadError(f"malformed content: {e}") from e

        return self._parse_rules(data)

    def _parse_rules(self, data: Any) -> RuleMap:
        """Validate the rules document and normalize its keys."""
        if not isinstance(data, dict) or "rules" not in data:
            raise ConfigLoadError("expected an object with a 'rules' field")

        raw_rules = data["rules"]
        if not isinstance(raw_rules, dict):
            raise ConfigLoadError("'rules' must map extensions to folder names")

        rules: RuleMap = {}
        for extension, destination in raw_rules.items():
            if not isinstance(extension, str) or not isinstance(destination, str):
                raise ConfigLoadError(
                    f"rule {extension!r}: {destination!r} is not a string pair"
                )
            if not extension or extension == ".":
                raise ConfigLoadError("empty extension in rules")

            rules[normalize_extension(extension)] = destination

        return rules


def normalize_extension(extension: str) -> str:
    """Return the lookup key for an extension, e.g. 'txt' -> '.txt'."""
    return extension if extension.startswith(".") else f".{extension}"

