"""Evidence items, private inventory files and evidence button paging."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .emotes import paginate
from .options import GENERAL, _decode, _encode, _IniFile

log = logging.getLogger(__name__)

DEFAULT_NAME = "<name>"
DEFAULT_DESCRIPTION = "<description>"
DEFAULT_IMAGE = "empty.png"


@dataclass
class Evidence:
    """One piece of evidence."""

    name: str = DEFAULT_NAME
    description: str = DEFAULT_DESCRIPTION
    image: str = DEFAULT_IMAGE


def evidence_changed(a: Evidence, b: Evidence) -> bool:
    """Return True if the two pieces of evidence differ in any field."""
    return a.name != b.name or a.image != b.image or a.description != b.description


def _value(entries: dict[str, str], key: str, default: str) -> str:
    raw = entries.get(key)
    return default if raw is None else _decode(raw, default)


def load_inventory(filename) -> list[Evidence]:
    """Read a saved inventory file.

    Raises FileNotFoundError when ``filename`` is not an existing file.
    """
    path = Path(filename)
    if not path.is_file():
        log.warning("Trying to load a non-existant evidence save file: %s", filename)
        raise FileNotFoundError(f"no evidence save file: {filename}")
    store = _IniFile(path)
    items = []
    for group in store.groups():
        if group == GENERAL:
            continue
        entries = store.entries(group)
        items.append(
            Evidence(
                name=_value(entries, "name", DEFAULT_NAME),
                description=_value(entries, "description", DEFAULT_DESCRIPTION),
                image=_value(entries, "image", DEFAULT_IMAGE),
            )
        )
    return items


def save_inventory(filename, items: Iterable[Evidence]) -> None:
    """Write ``items`` to an inventory file, replacing what it held."""
    store = _IniFile(Path(filename))
    store.clear()
    for index, item in enumerate(items):
        group = str(index)
        store.set(group, "name", _encode(item.name))
        store.set(group, "description", _encode(item.description))
        store.set(group, "image", _encode(item.image))
    store.save()


@dataclass(frozen=True)
class EvidencePage:
    """What one page of evidence buttons shows.

    The last slot overall is the "add evidence" button.
    """

    total_evidence: int
    total_pages: int
    count: int
    first: int
    has_previous: bool
    has_next: bool

    @property
    def ids(self) -> range:
        return range(self.first, self.first + self.count)

    @property
    def add_button(self) -> int | None:
        """The button on this page that adds evidence, if it is on this page."""
        if self.first <= self.total_evidence < self.first + self.count:
            return self.total_evidence - self.first
        return None

    def slots(self) -> Iterator[tuple[int, int, bool]]:
        """Yield (button, evidence index, is the add button) for each shown button."""
        for button, real_id in enumerate(self.ids):
            yield button, real_id, real_id == self.total_evidence


def paginate_evidence(total_evidence, per_page, page) -> EvidencePage:
    """Work out what page ``page`` shows of ``total_evidence`` items plus the add button."""
    base = paginate(total_evidence + 1, per_page, page)
    return EvidencePage(
        total_evidence=total_evidence,
        total_pages=base.total_pages,
        count=base.count,
        first=base.first,
        has_previous=base.has_previous,
        has_next=base.has_next,
    )