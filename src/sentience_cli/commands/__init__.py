"""CLI commands for Sentience CLI."""
