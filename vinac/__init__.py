"""File archiver with optional LZ77 compression of its members."""

__version__ = "0.1.0"
__all__ = ["archive", "cli", "directory", "lz"]