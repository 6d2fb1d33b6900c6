"""
Dynamic classification through a user-editable Lua script.

The script is a Lua chunk that receives the file path as its only argument
and returns a folder name, or nothing:

    local path = ...
    if path:match("%.log$") then
        return "Logs"
    end
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

import lupa

from file_sorter.errors import ConfigLoadError

logger = logging.getLogger(__name__)


class ScriptEvaluator(ABC):
    """Capability that maps a file path to an optional destination folder."""

    @abstractmethod
    def evaluate(self, file_path: Union[str, Path]) -> Optional[str]:
        """Return the destination folder for a file, or None for no match."""


class NullScriptEvaluator(ScriptEvaluator):
    """Evaluator used when dynamic classification is disabled."""

    def evaluate(self, file_path: Union[str, Path]) -> Optional[str]:
        return None


class LuaScriptEvaluator(ScriptEvaluator):
    """Run a Lua sort script inside a restricted environment."""

    # Globals visible to the script. No io, os, require, load or dofile.
    SAFE_GLOBALS = (
        "string",
        "table",
        "math",
        "utf8",
        "pairs",
        "ipairs",
        "next",
        "select",
        "tostring",
        "tonumber",
        "type",
        "pcall",
        "error",
    )

    MAX_INSTRUCTIONS = 1_000_000
    MAX_MEMORY = 64 * 1024 * 1024

    # The chunk runs in its own coroutine so the count hook never applies to
    # the caller. Once the budget is spent the hook fires on every
    # instruction, so catching the error with pcall does not help.
    _LOADER = """
    function(source, chunkname, names, max_instructions)
        local env = {}
        for _, name in ipairs(names) do
            env[name] = _G[name]
        end
        local chunk, message = load(source, chunkname, "t", env)
        if not chunk then
            return nil, message
        end

        local sethook = debug.sethook
        local function exhausted()
            sethook(exhausted, "", 1)
            error("instruction limit exceeded", 2)
        end

        return function(...)
            local co = coroutine.create(chunk)
            sethook(co, exhausted, "", max_instructions)
            local results = table.pack(coroutine.resume(co, ...))
            if not results[1] then
                error(results[2], 0)
            end
            return table.unpack(results, 2, results.n)
        end
    end
    """

    def __init__(self, script_file: Union[str, Path] = "sort_rules.lua"):
        """Initialize the evaluator.

        Args:
            script_file: Path to the Lua script, relative to the working directory
        """
        self.script_file = Path(script_file)
        self.lua = lupa.LuaRuntime(
            register_eval=False,
            register_builtins=False,
            max_memory=self.MAX_MEMORY,
        )
        self._loader = self.lua.eval(self._LOADER)
        self._safe_names = self.lua.table_from(list(self.SAFE_GLOBALS))

    def evaluate(self, file_path: Union[str, Path]) -> Optional[str]:
        """Run the script for one file.

        The script is re-read on every call so edits take effect on the
        next pass without restarting the daemon. Load and runtime errors
        are logged and treated as no match, as are scripts that exceed the
        instruction or memory budget.

        The path is handed to Lua as raw filesystem bytes, so names that
        are not valid UTF-8 still reach the script.
        """
        if not self.script_file.exists():
            return None

        try:
            chunk = self._compile()
        except ConfigLoadError as e:
            logger.warning(f"Ignoring sort script {self.script_file}: {e}")
            return None

        try:
            result = chunk(os.fsencode(file_path))
        except (lupa.LuaError, UnicodeError) as e:
            logger.warning(f"Sort script failed for {file_path}: {e}")
            return None

        return self._to_destination(result)

    def _compile(self) -> Any:
        """Read and compile the script into a sandboxed Lua function."""
        try:
            source = self.script_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(f"cannot read script: {e}") from e

        try:
            loaded = self._loader(
                source,
                f"={self.script_file.name}",
                self._safe_names,
                self.MAX_INSTRUCTIONS,
            )
        except lupa.LuaError as e:
            raise ConfigLoadError(str(e)) from e

        # load() returns (nil, message) on syntax errors
        if isinstance(loaded, tuple):
            chunk, message = (loaded + (None, None))[:2]
            if chunk is None:
                raise ConfigLoadError(f"syntax error: {message}")
            return chunk

        if loaded is None:
            raise ConfigLoadError("script did not compile")

        return loaded

    def _to_destination(self, result: Any) -> Optional[str]:
        """Keep only a non-empty string as a destination."""
        # Multiple return values arrive as a tuple
        if isinstance(result, tuple):
            result = result[0] if result else None

        if isinstance(result, bytes):
            result = result.decode("utf-8", errors="replace")

        if not isinstance(result, str) or not result.strip():
            if result is not None:
                logger.debug(f"Ignoring non-string script result: {result!r}")
            return None

        return result.strip()


def create_script_evaluator(
    script_file: Union[str, Path] = "sort_rules.lua", enabled: bool = True
) -> ScriptEvaluator:
    """Build the evaluator for the configured script file."""
    if not enabled:
        logger.info("Sort scripts disabled")
        return NullScriptEvaluator()
    return LuaScriptEvaluator(script_file)
