"""
Command line interface for Waybar Updates.
"""

# SPDX-License-Identifier: GPL-3.0-or-later
