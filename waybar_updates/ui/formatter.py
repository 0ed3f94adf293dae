"""
Tooltip formatting: column alignment and Pango color markup.
"""

# SPDX-License-Identifier: GPL-3.0-or-later

import html
from typing import List, Sequence

from ..constants import PALETTE_SIZE
from ..models import FormatOptions, UpdateLine

VERSION_SEPARATORS = ('.', '-')

SPAN_OPEN = "<span font-family='monospace'>"
SPAN_OPEN_COLOR = "<span font-family='monospace' color='#{color}'>"
SPAN_CLOSE = "</span>"


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def classify_version_delta(old_version: str, new_version: str) -> int:
    """
    Estimate how significant a version bump is.

    Counts the '.' and '-' characters of the new version up to and
    including the first position where the two versions differ. A bump
    of the first component yields 0 (major), the second 1 (minor) and so
    on. A position present in only one of the strings counts as a
    difference.

    Args:
        old_version: Installed version
        new_version: Available version

    Returns:
        Index into the color palette, clamped to its last entry
    """
    separators = 0
    for i in range(max(len(old_version), len(new_version))):
        new_char = new_version[i] if i < len(new_version) else None
        old_char = old_version[i] if i < len(old_version) else None
        if new_char in VERSION_SEPARATORS:
            separators += 1
        if new_char != old_char:
            break
    return min(separators, PALETTE_SIZE - 1)


def format_updates(updates: Sequence[str], options: FormatOptions) -> List[str]:
    """
    Render update lines for the tooltip.

    Lines UpdateLine.parse rejects are kept as they are, but escaped
    like every other line so they cannot break the surrounding markup.

    Args:
        updates: Merged update lines
        options: Rendering options

    Returns:
        New list of display lines, same length and order as updates
    """
    lines = list(updates)
    if options.raw_output and options.no_color:
        return lines

    parsed = [UpdateLine.parse(line) for line in lines]
    well_formed = [update for update in parsed if update is not None]
    name_width = max((len(u.display_name) for u in well_formed), default=0)
    version_width = max((len(u.old_version) for u in well_formed), default=0)

    for i, update in enumerate(parsed):
        if update is None:
            lines[i] = _escape(lines[i])
            continue

        if options.raw_output:
            name, old_version = update.display_name, update.old_version
        else:
            name = f"{update.display_name:<{name_width}}"
            old_version = f"{update.old_version:<{version_width}}"
        body = f"{_escape(name)} {_escape(old_version)} -> {_escape(update.new_version)}"

        if options.no_color:
            lines[i] = f"{SPAN_OPEN}{body}{SPAN_CLOSE}"
        else:
            index = classify_version_delta(update.old_version, update.new_version)
            lines[i] = f"{SPAN_OPEN_COLOR.format(color=options.colors[index])}{body}{SPAN_CLOSE}"

    return lines
