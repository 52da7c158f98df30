"""Tests for output formatters."""

from __future__ import annotations

import json

from sentience_cli.utils.ui.formatters import (
    format_error,
    format_output,
    format_success,
    format_warning,
)


def test_json(capsys):
    format_output({"total_sessions": 2, "daily": [{"date": "2024-03-13"}]}, "json")
    assert json.loads(capsys.readouterr().out)["total_sessions"] == 2


def test_yaml_keeps_key_order(capsys):
    format_output({"b": 1, "a": 2}, "yaml")
    assert capsys.readouterr().out.startswith("b: 1\na: 2")


def test_single_item_flattens_sections(capsys):
    format_output({"focus": {"work_minutes": 25}, "enabled": True, "token": None})
    out = capsys.readouterr().out
    assert "focus.work_minutes" in out
    assert "✓" in out
    assert "-" in out


def test_list_table(capsys):
    format_output([{"date": "2024-03-13", "minutes": 25}], title="Daily")
    out = capsys.readouterr().out
    assert "Daily" in out
    assert "2024-03-13" in out


def test_empty_list(capsys):
    format_output([])
    assert "No items found" in capsys.readouterr().out


def test_messages(capsys):
    format_error("broken")
    format_success("done")
    format_warning("careful")
    out = capsys.readouterr().out
    assert "Error: broken" in out
    assert "Success: done" in out
    assert "Warning: careful" in out
