"""Command-line interface for spaced-drill."""
