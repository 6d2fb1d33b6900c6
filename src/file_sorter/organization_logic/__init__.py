"""
Organization logic module for file sorting.
"""

from .rule_source import RuleSource, RuleMap
from .script_evaluator import (
    ScriptEvaluator,
    LuaScriptEvaluator,
    NullScriptEvaluator,
    create_script_evaluator,
)
from .classifier import Classifier, FileEntry
from .sorter import Sorter, SortResult

__all__ = [
    "RuleSource",
    "RuleMap",
    "ScriptEvaluator",
    "LuaScriptEvaluator",
    "NullScriptEvaluator",
    "create_script_evaluator",
    "Classifier",
    "FileEntry",
    "Sorter",
    "SortResult",
]
