"""Command implementations for the linkorder CLI."""
