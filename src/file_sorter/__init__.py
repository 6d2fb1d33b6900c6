"""
File Sorter - moves files into subdirectories based on extension rules
and optional user-supplied Lua scripts.
"""

__version__ = "1.0.0"
