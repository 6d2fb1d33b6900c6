"""
Unit tests for the rule source.
"""

import json
import tempfile
from pathlib import Path

import pytest
import yaml

from file_sorter.organization_logic.rule_source import RuleSource, normalize_extension


DEFAULTS = {
    ".txt": "TextFiles",
    ".jpg": "Images",
    ".png": "Images",
    ".rs": "RustCode",
}


class TestRuleSource:
    """Test the RuleSource class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.rules_file = self.temp_dir / "rules.json"

    def teardown_method(self):
        """Clean up test fixtures."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_missing_file_returns_defaults(self):
        """Test fallback when no rules file exists."""
        rules = RuleSource(self.rules_file).load()

        assert rules == DEFAULTS
        assert rules[".jpg"] == "Images"
        assert rules[".png"] == "Images"

    def test_load_json_rules(self):
        """Test loading rules from JSON."""
        self.rules_file.write_text(
            json.dumps({"rules": {".pdf": "Documents", ".jpg": "Photos"}})
        )

        rules = RuleSource(self.rules_file).load()

        assert rules == {".pdf": "Documents", ".jpg": "Photos"}

    def test_load_yaml_rules(self):
        """Test loading rules from YAML."""
        yaml_file = self.temp_dir / "rules.yaml"
        with open(yaml_file, "w") as f:
            yaml.safe_dump({"rules": {".mp3": "Music"}}, f)

        assert RuleSource(yaml_file).load() == {".mp3": "Music"}

    def test_keys_without_dot_are_normalized(self):
        """Test that 'pdf' is treated as '.pdf'."""
        self.rules_file.write_text(json.dumps({"rules": {"pdf": "Documents"}}))

        assert RuleSource(self.rules_file).load() == {".pdf": "Documents"}

    def test_keys_keep_case(self):
        """Test that extensions are case-sensitive."""
        self.rules_file.write_text(json.dumps({"rules": {".JPG": "Images"}}))

        rules = RuleSource(self.rules_file).load()

        assert ".JPG" in rules
        assert ".jpg" not in rules

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[]",
            json.dumps({"other": {}}),
            json.dumps({"rules": ["txt"]}),
            json.dumps({"rules": {".txt": 5}}),
            json.dumps({"rules": {"": "Empty"}}),
            "",
        ],
    )
    def test_malformed_file_returns_defaults(self, content):
        """Test fallback on garbled rule files."""
        self.rules_file.write_text(content)

        rules = RuleSource(self.rules_file).load()

        assert rules == DEFAULTS

    def test_defaults_are_fresh_copies(self):
        """Test that callers cannot mutate the built-in rules."""
        rules = RuleSource(self.rules_file).load()
        rules[".txt"] = "Changed"

        assert RuleSource.default_rules()[".txt"] == "TextFiles"

    def test_default_rules_file_name(self):
        """Test the default artifact location."""
        assert RuleSource().rules_file == Path("rules.json")


def test_normalize_extension():
    assert normalize_extension("txt") == ".txt"
    assert normalize_extension(".txt") == ".txt"


class TestLoadedFrom:
    def test_set_on_success(self, tmp_path):
        rules_file = tmp_path / "rules.json"
        rules_file.write_text(json.dumps({"rules": {".a": "A"}}))
        source = RuleSource(rules_file)

        source.load()

        assert source.loaded_from == rules_file

    def test_cleared_on_fallback(self, tmp_path):
        rules_file = tmp_path / "rules.json"
        rules_file.write_text(json.dumps({"rules": {".a": "A"}}))
        source = RuleSource(rules_file)
        source.load()

        rules_file.write_text("garbage")
        source.load()

        assert source.loaded_from is None
