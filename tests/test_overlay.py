import pytest

from colors import Pixel
from overlay import OverlayPath, OverlayStore

BLUE = Pixel(0, 0, 255, 0.75)


def test_stroke_lifecycle():
    store = OverlayStore()
    path = store.begin_stroke((1, 1), BLUE, 2)
    store.extend_current_stroke((2, 1))
    store.extend_current_stroke((3, 2))
    store.end_stroke()
    store.extend_current_stroke((9, 9))
    assert len(store) == 1
    assert path.points == [(1, 1), (2, 1), (3, 2)]
    assert path.color == BLUE
    assert path.width == 2


def test_extend_without_open_stroke_is_noop():
    store = OverlayStore()
    store.extend_current_stroke((1, 1))
    assert len(store) == 0


def test_each_stroke_gets_its_own_id():
    store = OverlayStore()
    a = store.begin_stroke((0, 0), BLUE, 1)
    b = store.begin_stroke((0, 0), BLUE, 1)
    assert a.id != b.id
    store.extend_current_stroke((5, 5))
    assert a.points == [(0, 0)]
    assert b.points == [(0, 0), (5, 5)]


def test_copy_is_independent():
    store = OverlayStore()
    store.begin_stroke((0, 0), BLUE, 1)
    clone = store.copy()
    store.extend_current_stroke((1, 1))
    assert clone.paths[0].points == [(0, 0)]
    assert clone != store


def test_list_round_trip():
    store = OverlayStore([OverlayPath("abc", [(0, 0), (1, 2)], BLUE, 3)])
    data = store.to_list()
    assert data == [{
        "id": "abc",
        "points": [{"x": 0, "y": 0}, {"x": 1, "y": 2}],
        "color": {"r": 0, "g": 0, "b": 255, "a": 0.75},
        "width": 3,
    }]
    assert OverlayStore.from_list(data) == store


def test_from_list_accepts_missing():
    assert len(OverlayStore.from_list(None)) == 0


def test_from_list_rejects_non_object_items():
    with pytest.raises(ValueError):
        OverlayStore.from_list([5])


def test_missing_width_defaults_to_one():
    path = OverlayPath.from_dict({"id": "abc", "points": [{"x": 0, "y": 0}]})
    assert path.width == 1


@pytest.mark.parametrize("width", ["wide", -3, 0, float("nan"), True])
def test_invalid_width_is_rejected(width):
    with pytest.raises(ValueError):
        OverlayPath.from_dict({"id": "abc", "points": [], "width": width})
