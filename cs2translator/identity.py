"""Player name normalization for own-message detection."""

from __future__ import annotations

import re

# LEFT-TO-RIGHT MARK: the client wraps some names in it
_LRM = "\u200e"

# Glyphs that start a platform account suffix ("Name@steam", "Name＠xbox").
# Ordinary @, FULLWIDTH COMMERCIAL AT, SMALL COMMERCIAL AT, TAG COMMERCIAL AT.
_AT_SIGNS = frozenset({"@", "\uff20", "\ufe6b", "\U000e0040"})

_RE_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Reduce a display name to the key used for identity comparison.

    Never used for display: the original name is what gets printed.
    """
    name = name.replace(_LRM, "")
    for i, ch in enumerate(name):
        if ch in _AT_SIGNS:
            name = name[:i]
            break
    name = _RE_WHITESPACE.sub(" ", name)
    return name.strip()


def is_own_name(player: str, own_name: str) -> bool:
    """Check whether a chat speaker is the configured local player."""
    own = normalize_name(own_name)
    if not own:
        return False
    return normalize_name(player) == own
