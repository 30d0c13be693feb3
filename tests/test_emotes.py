import pytest

from courtclient.emotes import (
    PREANIM,
    PREANIM_ZOOM,
    EmoteSelector,
    compute_grid,
    paginate,
    preview_name,
)


@pytest.mark.parametrize(
    "width,height,size,spacing",
    [
        (400, 200, (40, 40), (5, 5)),
        (333, 97, (30, 20), (7, 3)),
        (40, 40, (40, 40), (0, 0)),
        (500, 60, (25, 60), (10, 2)),
    ],
)
def test_grid_buttons_fit_and_do_not_overlap(width, height, size, spacing):
    grid = compute_grid(width, height, size, spacing)
    positions = list(grid.positions())
    assert len(positions) == grid.per_page
    assert len(set(positions)) == len(positions)
    for x, y in positions:
        assert x + size[0] <= width
        assert y + size[1] <= height


def test_grid_rows_fill_columns_first():
    grid = compute_grid(400, 200, (40, 40), (5, 5))
    positions = list(grid.positions())
    first_row = positions[: grid.columns]
    assert all(y == first_row[0][1] for _, y in first_row)
    assert positions[grid.columns][0] == positions[0][0]


def test_grid_zero_area_has_no_buttons():
    grid = compute_grid(0, 100, (40, 40), (5, 5))
    assert grid.per_page == 0
    assert list(grid.positions()) == []


def test_grid_smaller_than_button_keeps_one_button():
    assert compute_grid(30, 30, (40, 40), (5, 5)).per_page == 1


def test_grid_rejects_zero_step():
    with pytest.raises(ValueError):
        compute_grid(100, 100, (0, 10), (0, 10))


@pytest.mark.parametrize("total", range(1, 26))
def test_paginate_shows_every_item_once(total):
    per_page = 6
    shown = []
    page = 0
    while True:
        result = paginate(total, per_page, page)
        shown.extend(result.ids)
        if not result.has_next:
            break
        page += 1
    assert shown == list(range(total))
    assert page + 1 == result.total_pages


def test_paginate_flags_on_first_and_last_page():
    first = paginate(20, 6, 0)
    assert first.has_previous is False
    assert first.has_next is True
    last = paginate(20, 6, first.total_pages - 1)
    assert last.has_previous is True
    assert last.has_next is False


def test_paginate_exact_multiple_fills_pages():
    for page in range(3):
        assert paginate(18, 6, page).count == 6


def test_paginate_rejects_empty_pages():
    with pytest.raises(ValueError):
        paginate(10, 0, 0)


def test_preview_prefers_pre_animation():
    assert preview_name("normal", "zoom", True) == "zoom"


@pytest.mark.parametrize("pre,checked", [("-", True), ("", True), ("zoom", False)])
def test_preview_falls_back_to_talking(pre, checked):
    assert preview_name("normal", pre, checked) == "(b)normal"


def test_selecting_preanim_emote_checks_pre():
    selector = EmoteSelector(10, 4)
    assert selector.select(3, PREANIM) is True
    assert selector.select(4, 0) is False
    assert selector.select(5, PREANIM_ZOOM) is True


def test_selecting_same_emote_toggles_pre():
    selector = EmoteSelector(10, 4)
    selector.select(2, 0)
    assert selector.select(2, 0) is True
    assert selector.select(2, 0) is False


def test_clear_pre_on_play_keeps_pre_state():
    selector = EmoteSelector(10, 4, clear_pre_on_play=True)
    assert selector.select(3, PREANIM) is False
    assert selector.pre_checked is False


def test_click_maps_button_to_page():
    selector = EmoteSelector(10, 4)
    selector.next_page()
    selector.click(1, 0)
    assert selector.current_emote == 4 + 1
    assert selector.selected_button == 1


def test_selected_button_hidden_on_other_page():
    selector = EmoteSelector(10, 4)
    selector.select(1, 0)
    selector.next_page()
    assert selector.selected_button is None


def test_select_out_of_range_raises():
    selector = EmoteSelector(3, 4)
    with pytest.raises(IndexError):
        selector.select(3, 0)


def test_paging_past_ends_raises():
    selector = EmoteSelector(5, 4)
    with pytest.raises(IndexError):
        selector.previous_page()
    selector.next_page()
    with pytest.raises(IndexError):
        selector.next_page()
    assert selector.previous_page().first == 0