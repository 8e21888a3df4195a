"""Tab descriptor for the workspace registry."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Any, Mapping, Union


class InvalidTabDescriptor(ValueError):
    """A tab-opening request is missing one of its required fields."""


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


# camelCase keys used by collaborators -> dataclass field names
_FIELD_ALIASES: dict[str, str] = {
    "menuIcon": "menu_icon",
    "openedAt": "opened_at",
    "closedAt": "closed_at",
}

_REQUIRED = ("id", "title", "component")


@dataclass(frozen=True)
class Tab:
    """One open logical screen in the workspace (not a browser tab).

    Tabs are immutable; the registry derives stamped copies with
    ``dataclasses.replace`` instead of editing them in place.
    """

    id: str
    title: str
    component: str
    url: str | None = None
    closable: bool = True  # advisory, the registry never enforces it
    menu_icon: str | None = None
    opened_at: int | None = None  # epoch millis
    closed_at: int | None = None  # epoch millis, closed-history entries only

    @property
    def dedup_key(self) -> tuple[str, str | None]:
        """Secondary identity used when ids differ."""
        return (self.component, self.url)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Tab:
        """Build a Tab from a tab-opening request.

        Accepts both camelCase (``menuIcon``) and snake_case keys.  Unknown
        keys are ignored.

        Raises:
            InvalidTabDescriptor: If ``id``, ``title`` or ``component`` is
                missing or empty.
        """
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _FIELD_ALIASES.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value
        missing = [k for k in _REQUIRED if not values.get(k)]
        if missing:
            raise InvalidTabDescriptor(
                f"Tab descriptor missing required field(s): {', '.join(missing)}"
            )
        values["id"] = str(values["id"])
        if "closable" in values:
            values["closable"] = bool(values["closable"])
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys collaborators expect."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "component": self.component,
            "url": self.url,
            "closable": self.closable,
            "menuIcon": self.menu_icon,
        }
        if self.opened_at is not None:
            data["openedAt"] = self.opened_at
        if self.closed_at is not None:
            data["closedAt"] = self.closed_at
        return data


TabDescriptor = Union[Tab, Mapping[str, Any]]


def coerce_tab(descriptor: TabDescriptor) -> Tab:
    """Normalize a descriptor to a Tab without lifecycle timestamps."""
    tab = descriptor if isinstance(descriptor, Tab) else Tab.from_dict(descriptor)
    if tab.opened_at is not None or tab.closed_at is not None:
        tab = replace(tab, opened_at=None, closed_at=None)
    return tab
