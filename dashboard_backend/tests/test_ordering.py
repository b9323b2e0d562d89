import pytest

from src.api.ordering import append, find_by_id, insert_front, move, remove_by_id, upsert_by_id


def notes(*ids):
    return [{"id": i, "content": f"note {i}"} for i in ids]


def ids(items):
    return [it["id"] for it in items]


class TestMove:
    def test_move_forward_uses_shortened_list(self):
        # "a" is removed first, so index 2 addresses the slot after "c"
        assert move(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]

    def test_move_backward(self):
        assert move(["a", "b", "c", "d"], 3, 1) == ["a", "d", "b", "c"]

    def test_move_to_end(self):
        assert move(["a", "b", "c"], 0, 2) == ["b", "c", "a"]

    def test_same_index_is_identity(self):
        items = notes("a", "b", "c")
        assert move(items, 1, 1) == items

    @pytest.mark.parametrize("i,j", [(0, 1), (1, 2), (2, 1), (3, 2)])
    def test_adjacent_move_round_trips(self, i, j):
        items = ["a", "b", "c", "d"]
        assert move(move(items, i, j), j, i) == items

    def test_other_elements_keep_relative_order(self):
        result = move(list("abcdef"), 1, 4)
        assert [x for x in result if x != "b"] == list("acdef")

    def test_input_is_not_mutated(self):
        items = ["a", "b", "c"]
        move(items, 0, 2)
        assert items == ["a", "b", "c"]


class TestInsertAndAppend:
    def test_insert_front_puts_newest_first(self):
        assert ids(insert_front(notes("a", "b"), {"id": "new"})) == ["new", "a", "b"]

    def test_append_adds_last(self):
        assert ids(append(notes("a"), {"id": "b"})) == ["a", "b"]


class TestRemoveById:
    def test_removes_matching_entity(self):
        assert ids(remove_by_id(notes("a", "b", "c"), "b")) == ["a", "c"]

    def test_absent_id_returns_equal_list(self):
        items = notes("a", "b")
        result = remove_by_id(items, "zzz")
        assert result == items
        assert ids(result) == ["a", "b"]


class TestUpsertById:
    def test_replaces_in_place(self):
        result = upsert_by_id(notes("a", "b", "c"), {"id": "b", "content": "edited"})
        assert ids(result) == ["a", "b", "c"]
        assert result[1]["content"] == "edited"

    def test_unknown_id_does_not_insert(self):
        items = notes("a", "b")
        assert upsert_by_id(items, {"id": "x", "content": "new"}) == items

    def test_find_by_id(self):
        items = notes("a", "b")
        assert find_by_id(items, "b") == {"id": "b", "content": "note b"}
        assert find_by_id(items, "x") is None
