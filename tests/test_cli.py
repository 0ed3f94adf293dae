"""
Tests for the command line interface.
"""

from unittest.mock import patch

import pytest

from waybar_updates.cli.main import build_config, create_parser, main
from waybar_updates.exceptions import OutputError


class TestCLIParser:
    """Test command line argument parsing."""

    def test_defaults_are_unset(self):
        args = create_parser().parse_args([])

        assert args.interval is None
        assert args.interval_sync is None
        assert args.skip_aur is None
        assert args.color_major is None

    def test_double_dash_flags(self):
        args = create_parser().parse_args([
            "--interval", "5", "--interval-sync", "300", "--skip-aur",
            "--raw-output", "--no-color", "--color-pre", "abcdef",
        ])

        assert args.interval == 5
        assert args.interval_sync == 300
        assert args.skip_aur is True
        assert args.raw_output is True
        assert args.no_color is True
        assert args.color_pre == "abcdef"

    def test_single_dash_flags(self):
        args = create_parser().parse_args(["-interval", "5", "-interval-sync", "60", "-skip-aur"])

        assert args.interval == 5
        assert args.interval_sync == 60
        assert args.skip_aur is True

    def test_rejects_non_integer_interval(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--interval", "fast"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "waybar-updates" in capsys.readouterr().out


class TestBuildConfig:
    """Test precedence of defaults, file and flags."""

    def test_flags_override_file(self):
        args = create_parser().parse_args(["--interval", "20", "--color-major", "000000"])
        config = build_config(args, {"interval": 30, "interval_sync": 900, "colors": {"minor": "111111"}})

        assert config.interval == 20
        assert config.interval_sync == 900
        assert config.colors[0] == "000000"
        assert config.colors[1] == "111111"

    def test_file_booleans_kept_without_flags(self):
        args = create_parser().parse_args([])
        config = build_config(args, {"skip_aur": True})
        assert config.skip_aur is True


class TestMain:
    """Test the entry point exit codes."""

    @pytest.fixture(autouse=True)
    def _isolate(self):
        with patch('waybar_updates.cli.main.load_config_file', return_value={}), \
             patch('waybar_updates.cli.main.set_global_config'), \
             patch('waybar_updates.cli.main.signal.signal'):
            yield

    def test_invalid_intervals_exit_1(self, capsys):
        with patch('waybar_updates.cli.main.UpdateChecker') as mock_checker:
            code = main(["--interval", "0"])

        assert code == 1
        out = capsys.readouterr().out
        assert out.count("\n") == 1
        assert "`interval-sync`" in out
        mock_checker.assert_not_called()

    def test_sync_below_interval_exit_1(self, capsys):
        assert main(["--interval", "60", "--interval-sync", "30"]) == 1

    def test_invalid_color_exit_1(self, capsys):
        assert main(["--color-major", "#ff0000"]) == 1
        assert "color-major" in capsys.readouterr().out

    def test_runs_checker(self):
        with patch('waybar_updates.cli.main.UpdateChecker') as mock_checker:
            code = main(["--interval", "5", "--interval-sync", "60", "--skip-aur"])

        assert code == 0
        config = mock_checker.call_args[0][0]
        assert config.interval == 5
        assert config.skip_aur is True
        mock_checker.return_value.run.assert_called_once_with()

    def test_output_error_exit_2(self):
        with patch('waybar_updates.cli.main.UpdateChecker') as mock_checker:
            mock_checker.return_value.run.side_effect = OutputError("broken pipe")
            assert main([]) == 2

    def test_interrupt_exit_0(self):
        with patch('waybar_updates.cli.main.UpdateChecker') as mock_checker:
            mock_checker.return_value.run.side_effect = KeyboardInterrupt
            assert main([]) == 0
