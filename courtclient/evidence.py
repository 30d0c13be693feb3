"""The evidence locker: global and private evidence lists and their editing."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from .inventory import (
    DEFAULT_DESCRIPTION,
    DEFAULT_IMAGE,
    DEFAULT_NAME,
    Evidence,
    EvidencePage,
    load_inventory,
    paginate_evidence,
    save_inventory,
)
from .network import Packet

log = logging.getLogger(__name__)

ADD_EVIDENCE_TEXT = "Add new evidence..."


class EvidenceLocker:
    """Evidence shown to the player, in the global or the private inventory.

    Changes to global evidence are sent to the server through ``send``;
    private evidence is kept locally and written to ``autosave_path``.
    """

    def __init__(self, per_page, send: Callable[[Packet], None], autosave_path=None):
        if per_page <= 0:
            raise ValueError("per_page must be positive")
        self.per_page = per_page
        self.send = send
        self.autosave_path = Path(autosave_path) if autosave_path is not None else None
        self.global_evidence: list[Evidence] = []
        self.private_evidence: list[Evidence] = []
        self.local_evidence: list[Evidence] = []
        self.is_global = True
        self.current_evidence = 0
        self.current_page = 0
        self.overlay_open = False
        self.presenting = False
        self.double_click_edit = True
        if self.autosave_path is not None:
            try:
                self.private_evidence = load_inventory(self.autosave_path)
            except FileNotFoundError:
                pass

    # -- paging -----------------------------------------------------------

    def page(self) -> EvidencePage:
        """Return what the current page of evidence buttons shows."""
        return paginate_evidence(len(self.local_evidence), self.per_page, self.current_page)

    def next_page(self) -> EvidencePage:
        if not self.page().has_next:
            raise IndexError("already on the last page")
        self.current_page += 1
        return self.page()

    def previous_page(self) -> EvidencePage:
        if self.current_page <= 0:
            raise IndexError("already on the first page")
        self.current_page -= 1
        return self.page()

    def _real_id(self, button_id: int) -> int:
        return button_id + self.per_page * self.current_page

    # -- lists ------------------------------------------------------------

    def set_global_list(self, items: Iterable[Evidence]) -> None:
        """Take the server's evidence list."""
        self.global_evidence = list(items)
        if not self.is_global:
            return
        self.local_evidence = list(self.global_evidence)
        if self.overlay_open and self.current_evidence >= len(self.local_evidence):
            self._close()

    def switch(self, is_global) -> EvidencePage:
        """Show the global or the private inventory."""
        self._close()
        self.is_global = bool(is_global)
        self.presenting = False
        source = self.global_evidence if self.is_global else self.private_evidence
        self.local_evidence = list(source)
        self.current_page = 0
        return self.page()

    def _close(self) -> None:
        self.overlay_open = False

    def _autosave(self) -> None:
        if self.autosave_path is not None:
            save_inventory(self.autosave_path, self.private_evidence)

    def _open(self, button_id: int) -> Optional[Evidence]:
        real_id = self._real_id(button_id)
        if real_id >= len(self.local_evidence):
            return None
        self.current_evidence = real_id
        self.overlay_open = True
        return self.local_evidence[real_id]

    # -- player actions ---------------------------------------------------

    def click(self, button_id) -> Optional[Evidence]:
        """Handle a click on a button of the current page.

        The button after the last piece of evidence adds a new one.
        Otherwise the evidence is selected (or opened, if double-click
        editing is off) and returned.
        """
        real_id = self._real_id(button_id)
        count = len(self.local_evidence)
        if real_id == count:
            if self.is_global:
                self.send(Packet("PE", [DEFAULT_NAME, DEFAULT_DESCRIPTION, DEFAULT_IMAGE]))
            else:
                self.local_evidence.append(Evidence())
                self.private_evidence = list(self.local_evidence)
            return None
        if real_id > count:
            return None
        if not self.double_click_edit:
            return self._open(button_id)
        if self.overlay_open:
            return None
        self.current_evidence = real_id
        return self.local_evidence[real_id]

    def show(self, real_id) -> Optional[Evidence]:
        """Open a piece of global evidence on the page that holds it."""
        self.switch(True)
        self.current_page = real_id // self.per_page
        return self._open(real_id - self.per_page * self.current_page)

    def edit(self, name, description, image) -> None:
        """Store new contents for the current piece of evidence."""
        if not 0 <= self.current_evidence < len(self.local_evidence):
            raise IndexError(f"no evidence {self.current_evidence}")
        if self.is_global:
            self.send(
                Packet("EE", [str(self.current_evidence), name, description, image])
            )
        else:
            self.local_evidence[self.current_evidence] = Evidence(name, description, image)
            self.private_evidence = list(self.local_evidence)
            self._autosave()

    def delete(self) -> None:
        """Destroy the current piece of evidence."""
        self._close()
        if self.is_global:
            self.send(Packet("DE", [str(self.current_evidence)]))
        else:
            if not 0 <= self.current_evidence < len(self.local_evidence):
                raise IndexError(f"no evidence {self.current_evidence}")
            del self.local_evidence[self.current_evidence]
            self.private_evidence = list(self.local_evidence)
            self._autosave()
        self.current_evidence = 0

    def transfer(self) -> Optional[str]:
        """Copy the current evidence to the other inventory; return its name."""
        if self.current_evidence >= len(self.local_evidence):
            return None
        item = self.local_evidence[self.current_evidence]
        if self.is_global:
            self.private_evidence.append(Evidence(item.name, item.description, item.image))
            self._autosave()
        else:
            self.send(Packet("PE", [item.name, item.description, item.image]))
        return item.name

    def toggle_present(self) -> bool:
        """Toggle presenting the evidence with the next message."""
        if not self.is_global:
            self.presenting = False
            return False
        self.presenting = not self.presenting
        return self.presenting

    def hover_text(self, button_id, hovering) -> Optional[str]:
        """Return the name to display for a hover change, or None to keep it."""
        if self.overlay_open:
            return None
        final_id = self._real_id(button_id)
        count = len(self.local_evidence)
        if hovering:
            if final_id == count:
                return ADD_EVIDENCE_TEXT
            if final_id < count:
                return self.local_evidence[final_id].name
            return None
        if self.current_evidence < count:
            return self.local_evidence[self.current_evidence].name
        return ""

    # -- files ------------------------------------------------------------

    def load(self, filename) -> list[Evidence]:
        """Replace the private inventory with one read from ``filename``."""
        items = load_inventory(filename)
        self._close()
        self.private_evidence = items
        if not self.is_global:
            self.local_evidence = list(items)
        return list(items)

    def save(self, filename) -> None:
        """Write the private inventory to ``filename``."""
        self._close()
        save_inventory(filename, self.private_evidence)