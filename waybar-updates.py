#!/usr/bin/env python3
"""
Waybar Updates by NeatCode Labs
Streams pending pacman and AUR updates as JSON for a Waybar custom module.

Example Waybar configuration:

    "custom/updates": {
        "exec": "waybar-updates --interval 10 --interval-sync 600",
        "return-type": "json",
        "format": "{} {icon}",
        "format-icons": {"has-updates": "", "updated": ""}
    }
"""

# SPDX-License-Identifier: GPL-3.0-or-later

import sys

from waybar_updates.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
