"""autoarrange - inventory, classify and summarise recently changed files."""

__version__ = "1.0.0"
