"""Parser for CS2 console.log chat lines."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Suffix CS2 appends to the speaker when the message went to the observer's team
TEAM_MARKER = "[TOT]"


@dataclass(frozen=True, slots=True)
class ChatEvent:
    """Parsed chat message."""

    channel: str
    player: str
    message: str
    team_marker: bool = False


# CS2 console.log chat format examples:
# 01/27 20:28:10  [ALL] Alice: gl hf
# 01/27 20:28:10  [Team] Alice [TOT]: hello world
# 01/27 20:28:10  [ALL] Bob@steam: nice  (account suffix, see identity.py)
#
# Exactly two spaces between the time and the bracket: other console lines
# (engine, network, VScript output) use a single space there.
_RE_CHAT_LINE = re.compile(
    r"^\d{2}/\d{2}\s+\d{2}:\d{2}:\d{2}"  # MM/DD HH:MM:SS
    r"  \[([^\]]*)\]\s+"  # two spaces, then [channel]
    r"(.+?)"  # player (lazy: stops at the first usable colon)
    r"(\s+" + re.escape(TEAM_MARKER) + r")?"  # optional team marker
    r":\s*"  # : separator
    r"(.*)$",  # message text
    re.ASCII,  # \d and \s mean ASCII digits and whitespace only
)


def parse_line(line: str) -> ChatEvent | None:
    """Parse a single console.log line into a ChatEvent.

    Returns None for anything that is not a chat line; most of the console
    log is engine output, so a miss is the normal case.
    """
    m = _RE_CHAT_LINE.match(line.strip())
    if m is None:
        return None

    player = m.group(2).strip()
    if not player:
        return None

    return ChatEvent(
        channel=m.group(1),
        player=player,
        message=m.group(4).strip(),
        team_marker=m.group(3) is not None,
    )
