"""Emote button layout, paging and selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

PREANIM = 1
PREANIM_ZOOM = 6


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


@dataclass(frozen=True)
class ButtonGrid:
    """A grid of equally sized buttons laid out in an area."""

    columns: int
    rows: int
    button_width: int
    button_height: int
    x_spacing: int
    y_spacing: int

    @property
    def per_page(self) -> int:
        return max(0, self.columns * self.rows)

    def positions(self) -> Iterator[tuple[int, int]]:
        """Yield the top-left corner of each button, row by row."""
        for n in range(self.per_page):
            row, column = divmod(n, self.columns)
            yield (
                (self.button_width + self.x_spacing) * column,
                (self.button_height + self.y_spacing) * row,
            )


def compute_grid(area_width, area_height, button_size, spacing) -> ButtonGrid:
    """Fit as many buttons of ``button_size`` into the area as the spacing allows."""
    button_width, button_height = button_size
    x_spacing, y_spacing = spacing
    if area_width == 0 or area_height == 0:
        return ButtonGrid(0, 0, button_width, button_height, x_spacing, y_spacing)
    if x_spacing + button_width == 0 or y_spacing + button_height == 0:
        raise ValueError("button size plus spacing must not be zero")
    columns = _trunc_div(area_width - button_width, x_spacing + button_width) + 1
    rows = _trunc_div(area_height - button_height, y_spacing + button_height) + 1
    return ButtonGrid(columns, rows, button_width, button_height, x_spacing, y_spacing)


@dataclass(frozen=True)
class EmotePage:
    """What one page of buttons shows."""

    total_pages: int
    count: int
    first: int
    has_previous: bool
    has_next: bool

    @property
    def ids(self) -> range:
        return range(self.first, self.first + self.count)


def paginate(total, per_page, page) -> EmotePage:
    """Work out which of ``total`` items page number ``page`` shows."""
    if per_page <= 0:
        raise ValueError("per_page must be positive")
    total_pages, remainder = divmod(total, per_page)
    if remainder:
        total_pages += 1
        count = per_page if total_pages > page + 1 else remainder
    else:
        count = per_page
    return EmotePage(
        total_pages=total_pages,
        count=count,
        first=page * per_page,
        has_previous=page > 0,
        has_next=total_pages > page + 1,
    )


class EmoteSelector:
    """The emote chosen by the player and the page of emote buttons shown."""

    def __init__(self, total_emotes, per_page, clear_pre_on_play=False):
        if per_page <= 0:
            raise ValueError("per_page must be positive")
        self.total_emotes = total_emotes
        self.per_page = per_page
        self.clear_pre_on_play = clear_pre_on_play
        self.current_emote = 0
        self.current_page = 0
        self.pre_checked = False

    def page(self) -> EmotePage:
        return paginate(self.total_emotes, self.per_page, self.current_page)

    def next_page(self) -> EmotePage:
        if not self.page().has_next:
            raise IndexError("already on the last page")
        self.current_page += 1
        return self.page()

    def previous_page(self) -> EmotePage:
        if self.current_page <= 0:
            raise IndexError("already on the first page")
        self.current_page -= 1
        return self.page()

    @property
    def selected_button(self) -> Optional[int]:
        """The button on the current page showing the selected emote, if any."""
        first = self.current_page * self.per_page
        if first <= self.current_emote < first + self.per_page:
            return self.current_emote % self.per_page
        return None

    def select(self, emote_id, emote_mod) -> bool:
        """Select an emote; return whether its pre-animation will play."""
        if not 0 <= emote_id < self.total_emotes:
            raise IndexError(f"no emote {emote_id}")
        previous = self.current_emote
        self.current_emote = emote_id
        if previous == emote_id:
            self.pre_checked = not self.pre_checked
        elif not self.clear_pre_on_play:
            self.pre_checked = emote_mod in (PREANIM, PREANIM_ZOOM)
        return self.pre_checked

    def click(self, button_id, emote_mod) -> bool:
        """Select the emote behind a button on the current page."""
        return self.select(button_id + self.per_page * self.current_page, emote_mod)


def preview_name(emote, pre_emote, pre_checked) -> str:
    """Return the animation a preview of the emote should play."""
    if pre_checked and pre_emote and pre_emote != "-":
        return pre_emote
    return "(b)" + emote