# Overview: Service-layer operations for usernames; maps customer names to logins.

import re


_WHITESPACE_RE = re.compile(r"\s+")


def to_username(display_name: str | None) -> str:
    """
    Canonical login for a customer display name: whitespace removed, uppercased.

    "Stark Industries" -> "STARKINDUSTRIES". The same mapping decides which
    records a logged-in customer may see.
    """
    return _WHITESPACE_RE.sub("", display_name or "").upper()
