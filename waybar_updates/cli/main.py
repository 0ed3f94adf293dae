"""
Command line entry point for Waybar Updates.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

import argparse
import signal
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .. import __version__
from ..checker import UpdateChecker
from ..config import Config, load_config_file
from ..constants import (
    COLOR_CATEGORIES, DEFAULT_COLORS, DEFAULT_INTERVAL, DEFAULT_INTERVAL_SYNC,
    EXIT_CONFIG_ERROR, EXIT_OK, EXIT_OUTPUT_ERROR
)
from ..exceptions import ConfigurationError, OutputError
from ..utils.logger import get_logger, set_global_config

logger = get_logger(__name__)

COLOR_HELP = {
    "major": "major version update",
    "minor": "minor version update",
    "patch": "patch update",
    "pre": "pre update",
    "other": "some other update",
}


def create_parser() -> argparse.ArgumentParser:
    """
    Create command line argument parser.

    Every option also accepts a single leading dash (`-interval 5`), and
    every default is None so that only flags given explicitly override
    the config file.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="waybar-updates",
        description="Report pending pacman and AUR updates as a Waybar JSON stream",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-interval", "--interval",
        type=int, default=None, metavar="SECONDS",
        help=f"Set the interval between updates in seconds (default: {DEFAULT_INTERVAL})."
    )
    parser.add_argument(
        "-interval-sync", "--interval-sync",
        dest="interval_sync", type=int, default=None, metavar="SECONDS",
        help=f"Set the interval between sync updates in seconds (default: {DEFAULT_INTERVAL_SYNC})."
    )
    parser.add_argument(
        "-skip-aur", "--skip-aur",
        dest="skip_aur", action="store_true", default=None,
        help="Skips checking for AUR updates."
    )
    parser.add_argument(
        "-raw-output", "--raw-output",
        dest="raw_output", action="store_true", default=None,
        help="Disables formatting tooltip text into columns."
    )
    parser.add_argument(
        "-no-color", "--no-color",
        dest="no_color", action="store_true", default=None,
        help="Disables coloring packages by version category."
    )
    for category in COLOR_CATEGORIES:
        parser.add_argument(
            f"-color-{category}", f"--color-{category}",
            dest=f"color_{category}", default=None, metavar="HEX",
            help=(f"Color used for {COLOR_HELP[category]}, ignored if --no-color is present "
                  f"(default: {DEFAULT_COLORS[category]})."),
        )
    parser.add_argument(
        "-aur-timeout", "--aur-timeout",
        dest="aur_timeout", type=float, default=None, metavar="SECONDS",
        help="Timeout for the AUR request (default: wait indefinitely)."
    )
    parser.add_argument(
        "-config", "--config",
        type=str, default=None, metavar="PATH",
        help="Path to a JSON configuration file"
    )
    parser.add_argument(
        "-verbose", "--verbose",
        action="store_true", default=None,
        help="Enable debug logging on stderr"
    )
    parser.add_argument(
        "-log-file", "--log-file",
        dest="log_file", type=str, default=None, metavar="PATH",
        help="Also write logs to this file"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def build_config(args: argparse.Namespace, file_data: Optional[Dict[str, Any]] = None) -> Config:
    """
    Combine defaults, config file values and command line flags.

    Raises:
        ConfigurationError: If the config file has an invalid shape
    """
    config = Config.from_dict(file_data or {})

    overrides: Dict[str, Any] = {}
    for name in ("interval", "interval_sync", "skip_aur", "raw_output", "no_color",
                 "aur_timeout", "verbose", "log_file"):
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value

    colors = list(config.colors)
    for index, category in enumerate(COLOR_CATEGORIES):
        value = getattr(args, f"color_{category}", None)
        if value is not None:
            colors[index] = value
    overrides["colors"] = tuple(colors)

    return replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the status stream."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args, load_config_file(args.config))
        config.validate()
    except ConfigurationError as e:
        # Waybar shows stdout, so the diagnostic goes there
        print(e)
        return EXIT_CONFIG_ERROR

    set_global_config({
        'verbose_logging': config.verbose,
        'log_file': config.log_file,
    })

    # SIGTERM from Waybar ends the loop like Ctrl+C
    signal.signal(signal.SIGTERM, signal.default_int_handler)

    checker = UpdateChecker(config)
    try:
        checker.run()
    except OutputError as e:
        logger.error(f"Cannot write status: {e}")
        return EXIT_OUTPUT_ERROR
    except KeyboardInterrupt:
        logger.debug("Interrupted, exiting")
        return EXIT_OK

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
