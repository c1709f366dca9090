"""Version-aware ordering for variant keys and sample names."""

from __future__ import annotations

import re

_DIGITS_RE = re.compile(r"(\d+)")


def version_key(text: str) -> list[str | int]:
    """Split ``text`` into alternating text and integer runs.

    ``re.split`` with a capturing group always puts text runs at even indexes and
    digit runs at odd indexes, so two keys never compare a string to an int.
    """

    return [int(part) if index % 2 else part for index, part in enumerate(_DIGITS_RE.split(text))]
