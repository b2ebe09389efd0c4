"""Command-line helpers shared by entry points."""
