"""
Tests for the merge and emit loop.
"""

import io
import json
import threading
from unittest.mock import Mock

import pytest

from waybar_updates.checker import StatusMerger, UpdateChecker
from waybar_updates.cli.output import StatusWriter
from waybar_updates.config import Config
from waybar_updates.exceptions import OutputError
from waybar_updates.models import NO_DATA, AurPackage, FormatOptions, StatusClass, UpdateSource
from waybar_updates.pollers import AurPoller, PacmanPoller

PACMAN = UpdateSource.PACMAN
AUR = UpdateSource.AUR
RAW = FormatOptions(raw_output=True, no_color=True)


class TestStatusMerger:
    """Test slot handling and status building."""

    def test_initially_up_to_date(self):
        status = StatusMerger().status()

        assert status.to_dict() == {
            "text": "",
            "tooltip": "All packages are up to date",
            "class": "updated",
            "alt": "updated",
        }

    def test_initial_status(self):
        status = StatusMerger.initial_status()
        assert status.text == "0"
        assert status.tooltip == "Checking for updates..."
        assert status.state is StatusClass.HAS_UPDATES

    def test_no_data_keeps_slot(self):
        merger = StatusMerger(RAW)
        merger.update(AUR, ["aur/foo 1 -> 2"])

        assert merger.update(AUR, NO_DATA) is False
        assert merger.slot(AUR) == ["aur/foo 1 -> 2"]

    def test_empty_list_clears_slot(self):
        merger = StatusMerger(RAW)
        merger.update(PACMAN, ["vim 1 -> 2"])

        assert merger.update(PACMAN, []) is True
        assert merger.slot(PACMAN) == []
        assert merger.status().state is StatusClass.UPDATED

    def test_pacman_entries_first(self):
        merger = StatusMerger(RAW)
        merger.update(AUR, ["aur/foo 1 -> 2"])
        merger.update(PACMAN, ["vim 1 -> 2", "git 1 -> 2"])

        assert merger.merged() == ["vim 1 -> 2", "git 1 -> 2", "aur/foo 1 -> 2"]

    def test_status_counts_and_joins(self):
        merger = StatusMerger(RAW)
        merger.update(PACMAN, ["vim 1 -> 2"])
        merger.update(AUR, ["aur/foo 1 -> 2"])

        status = merger.status()

        assert status.to_dict() == {
            "text": "2",
            "tooltip": "vim 1 -> 2\naur/foo 1 -> 2",
            "class": "has-updates",
            "alt": "has-updates",
        }

    def test_malformed_line_still_counted(self):
        merger = StatusMerger(FormatOptions())
        merger.update(PACMAN, ["checkupdates failed: exit status 1", "vim 1.0 -> 1.1"])

        status = merger.status()

        assert status.text == "2"
        assert status.tooltip.split("\n")[0] == "checkupdates failed: exit status 1"

    def test_formatter_applied(self):
        merger = StatusMerger(FormatOptions(colors=("a", "b", "c", "d", "e")))
        merger.update(PACMAN, ["vim 1.0 -> 2.0"])

        assert merger.status().tooltip == "<span font-family='monospace' color='#a'>vim 1.0 -> 2.0</span>"

    def test_aur_diagnostic_cannot_break_markup(self):
        merger = StatusMerger(FormatOptions())
        merger.update(PACMAN, ["linux 6.1-1 -> 6.2-1"])
        merger.update(AUR, ["Error querying AUR API: HTTP request failed: /rpc/?v=5&type=info&arg%5B%5D=foo"])

        tooltip = merger.status().tooltip

        assert "&type" not in tooltip
        assert tooltip.split("\n")[1].endswith("/rpc/?v=5&amp;type=info&amp;arg%5B%5D=foo")
        assert merger.slot(AUR)[0].endswith("&type=info&arg%5B%5D=foo")

    def test_formatting_does_not_touch_slots(self):
        merger = StatusMerger(FormatOptions())
        merger.update(PACMAN, ["vim 1.0 -> 2.0"])
        merger.status()

        assert merger.slot(PACMAN) == ["vim 1.0 -> 2.0"]

    def test_count_matches_slots_for_any_sequence(self):
        merger = StatusMerger(RAW)
        ticks = [
            (PACMAN, ["a 1 -> 2"]),
            (AUR, NO_DATA),
            (AUR, ["aur/b 1 -> 2", "aur/c 1 -> 2"]),
            (PACMAN, []),
            (AUR, NO_DATA),
            (PACMAN, ["a 1 -> 2", "d 1 -> 2", "e 1 -> 2"]),
            (AUR, ["Nothing from aur installed"]),
        ]

        for source, result in ticks:
            merger.update(source, result)
            expected = len(merger.slot(PACMAN)) + len(merger.slot(AUR))
            assert merger.status().count == expected


def _read_statuses(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


@pytest.mark.timeout(20)
class TestUpdateChecker:
    """Test the full loop with fake package sources."""

    def _checker(self, package_manager, aur_client, **config_kwargs):
        config = Config(interval=1, interval_sync=10, no_color=True, raw_output=True, **config_kwargs)
        stream = io.StringIO()
        checker = UpdateChecker(
            config,
            writer=StatusWriter(stream),
            package_manager=package_manager,
            aur_client=aur_client,
        )
        return checker, stream

    def test_builds_both_pollers(self, package_manager, aur_client):
        checker, _ = self._checker(package_manager, aur_client)

        assert [type(p) for p in checker.pollers] == [PacmanPoller, AurPoller]
        assert all(p.schedule.every_n_ticks == 10 for p in checker.pollers)

    def test_skip_aur(self, package_manager, aur_client):
        checker, _ = self._checker(package_manager, aur_client, skip_aur=True)

        assert [type(p) for p in checker.pollers] == [PacmanPoller]
        assert checker.aur_client is None

    def test_emits_initial_then_every_tick(self, package_manager, aur_client):
        package_manager.check_for_updates.return_value = ["linux 6.1-1 -> 6.2-1"]
        package_manager.get_foreign_packages.return_value = {"foo": "1.0"}
        aur_client.info.return_value = [AurPackage(name="foo", version="1.1")]
        checker, stream = self._checker(package_manager, aur_client)

        checker.run(max_ticks=2)

        statuses = _read_statuses(stream)
        assert len(statuses) == 3
        assert statuses[0]["tooltip"] == "Checking for updates..."
        assert statuses[1]["text"] == "1"
        assert statuses[2] == {
            "text": "2",
            "tooltip": "linux 6.1-1 -> 6.2-1\naur/foo 1.0 -> 1.1",
            "class": "has-updates",
            "alt": "has-updates",
        }
        assert checker.stop_event.is_set()
        aur_client.close.assert_called_once()

    def test_up_to_date(self, package_manager, aur_client):
        checker, stream = self._checker(package_manager, aur_client, skip_aur=True)

        checker.run(max_ticks=1)

        assert _read_statuses(stream)[-1] == {
            "text": "",
            "tooltip": "All packages are up to date",
            "class": "updated",
            "alt": "updated",
        }

    def test_output_error_propagates_and_stops(self, package_manager, aur_client):
        writer = Mock(spec=StatusWriter)
        writer.write.side_effect = OutputError("broken pipe")
        config = Config(interval=1, interval_sync=10, skip_aur=True)
        checker = UpdateChecker(config, writer=writer, package_manager=package_manager)

        with pytest.raises(OutputError):
            checker.run(max_ticks=1)

        assert checker.stop_event.is_set()

    def test_receive_folds_no_data(self, package_manager, aur_client):
        checker, _ = self._checker(package_manager, aur_client)
        checker.merger.update(AUR, ["aur/foo 1 -> 2"])

        aur_poller = checker.pollers[1]
        aur_poller.schedule.advance()  # consume the due first tick
        aur_poller.start()
        try:
            source = checker.receive(timeout=5)
        finally:
            checker.stop()

        assert source is AUR
        assert checker.merger.slot(AUR) == ["aur/foo 1 -> 2"]

    def test_hung_aur_query_does_not_stall_pacman(self, package_manager, aur_client):
        release = threading.Event()

        def _hang():
            release.wait(30)
            return {}

        package_manager.check_for_updates.return_value = ["linux 6.1-1 -> 6.2-1"]
        package_manager.get_foreign_packages.side_effect = _hang
        checker, stream = self._checker(package_manager, aur_client)

        try:
            checker.run(max_ticks=3)
        finally:
            release.set()

        statuses = _read_statuses(stream)
        assert len(statuses) == 4
        assert all(s["tooltip"] == "linux 6.1-1 -> 6.2-1" for s in statuses[1:])
        assert package_manager.check_for_updates.call_count >= 3
        aur_client.info.assert_not_called()
