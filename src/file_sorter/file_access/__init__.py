from .mover import FileMover, validate_destination

__all__ = ["FileMover", "validate_destination"]
