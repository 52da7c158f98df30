"""Services for Sentience CLI."""
