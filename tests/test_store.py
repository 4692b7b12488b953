import re

import pytest

from pixel_hunter.exceptions import RoomCodeExhausted
from pixel_hunter.schemas import RoomConfig
from pixel_hunter.store import RoomStore, generate_room_code

CODE_PATTERN = re.compile(r"^[0-9A-Z]{6}$")


def test_generated_codes_are_six_uppercase_base36_chars():
    for _ in range(500):
        assert CODE_PATTERN.match(generate_room_code())


def test_created_rooms_have_unique_ids():
    store = RoomStore()
    rooms = [store.create() for _ in range(200)]
    ids = {room.room_id for room in rooms}
    assert len(ids) == 200
    assert len(store) == 200
    assert all(CODE_PATTERN.match(rid) for rid in ids)


def test_create_retries_on_collision():
    codes = iter(["AAAAAA", "AAAAAA", "AAAAAA", "BBBBBB"])
    store = RoomStore(code_factory=lambda: next(codes))
    first = store.create()
    second = store.create()
    assert first.room_id == "AAAAAA"
    assert second.room_id == "BBBBBB"


def test_create_gives_up_after_max_attempts():
    store = RoomStore(code_factory=lambda: "AAAAAA", max_attempts=3)
    store.create()
    with pytest.raises(RoomCodeExhausted):
        store.create()
    assert len(store) == 1


def test_get_is_case_insensitive():
    store = RoomStore(code_factory=lambda: "X1Y2Z3")
    room = store.create()
    assert store.get("x1y2z3") is room
    assert "x1y2z3" in store
    assert store.get("NOPE00") is None


def test_remove_unknown_room_is_noop():
    store = RoomStore()
    room = store.create()
    store.remove("ZZZZZZ")
    assert len(store) == 1
    store.remove(room.room_id)
    store.remove(room.room_id)
    assert len(store) == 0


def test_rooms_get_default_config_unless_given():
    default = RoomConfig(target_level=20)
    store = RoomStore(default_config=default)
    assert store.create().config.target_level == 20
    assert store.create(RoomConfig(target_level=5)).config.target_level == 5
