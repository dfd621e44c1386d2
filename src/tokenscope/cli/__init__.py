"""Command-line interface for tokenscope."""
