"""Sentience Focus CLI - Pomodoro focus timer with session statistics."""

__version__ = "1.0.0"
