"""
Entry point for ``python -m file_sorter``.
"""

from file_sorter.app import main

if __name__ == "__main__":
    main(prog_name="file-sorter")
