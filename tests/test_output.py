"""
Tests for the JSON status stream.
"""

import io
import json
from unittest.mock import Mock

import pytest

from waybar_updates.cli.output import StatusWriter
from waybar_updates.exceptions import OutputError
from waybar_updates.models import MergedStatus, StatusClass


def test_writes_one_object_per_line():
    stream = io.StringIO()
    writer = StatusWriter(stream)

    writer.write(MergedStatus("", "All packages are up to date", StatusClass.UPDATED))
    writer.write(MergedStatus("2", "a 1 -> 2\nb 1 -> 2", StatusClass.HAS_UPDATES))

    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0]) == {
        "text": "",
        "tooltip": "All packages are up to date",
        "class": "updated",
        "alt": "updated",
    }
    assert json.loads(lines[1])["tooltip"] == "a 1 -> 2\nb 1 -> 2"
    assert writer.written == 2


def test_keeps_markup_and_unicode_unescaped():
    stream = io.StringIO()
    StatusWriter(stream).write(
        MergedStatus("1", "<span color='#ff0000'>paquet 1 -> 2 é</span>", StatusClass.HAS_UPDATES)
    )

    assert "é" in stream.getvalue()
    assert "<span" in stream.getvalue()


@pytest.mark.parametrize("error", [BrokenPipeError("pipe"), OSError("closed"), ValueError("closed file")])
def test_write_failure_raises_output_error(error):
    stream = Mock()
    stream.write.side_effect = error
    writer = StatusWriter(stream)

    with pytest.raises(OutputError):
        writer.write(MergedStatus("0", "Checking for updates...", StatusClass.HAS_UPDATES))
    assert writer.written == 0
