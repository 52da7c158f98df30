"""Data models for Sentience CLI."""
