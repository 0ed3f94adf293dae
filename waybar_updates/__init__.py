"""
Waybar Updates - Modular Package

A Waybar custom module that watches for pending pacman and AUR updates
and streams a JSON status line for the bar.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

__version__ = "1.0.0"
__author__ = "NeatCode Labs"
__email__ = "neatcodelabs@gmail.com"
