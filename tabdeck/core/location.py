"""Location strings exchanged with the host navigation stack.

Wire format is ``<path>`` when no tab is active and ``<path>#tab=<tabId>``
when one is.  Nothing else (query strings, extra fragment keys) is produced.
Tab ids are written verbatim; no percent-encoding is applied either way.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..constants import TAB_FRAGMENT_KEY

_TAB_FRAGMENT_RE = re.compile(rf"#{TAB_FRAGMENT_KEY}=(.+)")


def tab_id_from_fragment(fragment: str) -> str | None:
    """Extract the tab id from a fragment such as ``#tab=orders``.

    Accepts either the bare fragment or a full location string; only the
    portion from the first ``#`` onward is inspected.
    """
    hash_at = fragment.find("#")
    if hash_at == -1:
        return None
    match = _TAB_FRAGMENT_RE.search(fragment[hash_at:])
    return match.group(1) if match else None


@dataclass(frozen=True)
class Location:
    """A navigable location: a path plus an optional fragment."""

    path: str = "/"
    fragment: str = ""  # includes the leading "#", or empty

    @classmethod
    def parse(cls, text: str) -> Location:
        path, sep, rest = text.partition("#")
        return cls(path=path, fragment=f"#{rest}" if sep else "")

    @classmethod
    def for_tab(cls, path: str, tab_id: str | None) -> Location:
        """Location naming *tab_id*, or the bare path when *tab_id* is None."""
        if tab_id is None:
            return cls(path=path)
        return cls(path=path, fragment=f"#{TAB_FRAGMENT_KEY}={tab_id}")

    @property
    def tab_id(self) -> str | None:
        return tab_id_from_fragment(self.fragment)

    def __str__(self) -> str:
        return f"{self.path}{self.fragment}"
