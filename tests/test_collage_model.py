"""Unit tests for the ordered collage model."""

from __future__ import annotations

import threading
from typing import List

import pytest

from collage.model import CollageEntry, CollageModel, ModelChange


def _model_with(count: int) -> CollageModel:
    model = CollageModel()
    for i in range(count):
        model.add_image(f"img{i}")
    return model


def _images(model: CollageModel) -> List[str]:
    return [entry.image for entry in model]


def test_add_appends_in_order():
    model = CollageModel()
    first = model.add_image("a")
    second = model.add(CollageEntry("b"))

    assert len(model) == 2
    assert model[0] is first
    assert model[-1] is second
    assert _images(model) == ["a", "b"]


def test_add_ignores_duplicate_token():
    model = CollageModel()
    entry = model.add_image("a")
    model.add(entry)
    assert len(model) == 1


def test_entries_compare_by_token_only():
    entry = CollageEntry("a")
    same_token = CollageEntry("different", token=entry.token)
    assert entry == same_token
    assert entry != CollageEntry("a")


@pytest.mark.parametrize("index", [0, 2, 4])
def test_remove_shifts_left_and_keeps_tokens(index):
    model = _model_with(5)
    before = model.tokens()

    removed = model.remove(index)

    assert removed is not None and removed.token == before[index]
    assert len(model) == 4
    assert model.tokens() == before[:index] + before[index + 1:]


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_remove_out_of_range_is_noop(index):
    model = _model_with(3)
    before = model.tokens()

    assert model.remove(index) is None
    assert model.tokens() == before


def test_remove_on_empty_model_is_noop():
    model = CollageModel()
    assert model.remove(0) is None
    assert len(model) == 0


@pytest.mark.parametrize(
    "source, target, expected",
    [
        (0, 2, ["img1", "img2", "img0", "img3"]),
        (3, 0, ["img3", "img0", "img1", "img2"]),
        (1, 2, ["img0", "img2", "img1", "img3"]),
        (0, 4, ["img1", "img2", "img3", "img0"]),  # to == length means the end
        (2, 1, ["img0", "img2", "img1", "img3"]),
    ],
)
def test_move_uses_post_removal_clamp(source, target, expected):
    model = _model_with(4)
    assert model.move(source, target) is True
    assert _images(model) == expected


@pytest.mark.parametrize("source, target", [(1, 1), (-1, 0), (4, 0), (0, 5), (0, -1)])
def test_move_invalid_is_noop(source, target):
    model = _model_with(4)
    before = model.tokens()
    assert model.move(source, target) is False
    assert model.tokens() == before


def test_move_last_to_length_leaves_order():
    model = _model_with(3)
    before = model.tokens()
    assert model.move(2, 3) is False
    assert model.tokens() == before


def test_move_then_inverse_restores_order():
    for count in range(2, 6):
        for a in range(count):
            for b in range(count):
                if a == b:
                    continue
                model = _model_with(count)
                original = model.tokens()
                token = original[a]
                model.move(a, b)
                model.move(model.index_of(token), a)
                assert model.tokens() == original, (count, a, b)


def test_index_of_and_clear():
    model = _model_with(3)
    token = model[1].token
    assert model.index_of(token) == 1

    model.clear()
    assert model.is_empty
    assert model.index_of(token) is None


def test_listeners_receive_effective_changes_only():
    model = _model_with(3)
    changes: List[ModelChange] = []
    unsubscribe = model.subscribe(changes.append)

    model.add_image("x")
    model.remove(99)
    model.move(0, 0)
    model.move(0, 2)
    model.remove(0)
    model.clear()
    model.clear()

    assert [(c.kind, c.index, c.target) for c in changes] == [
        ("added", 3, 3),
        ("moved", 0, 2),
        ("removed", 0, -1),
        ("cleared", -1, -1),
    ]

    unsubscribe()
    model.add_image("y")
    assert len(changes) == 4


def test_failing_listener_is_logged_and_isolated(caplog):
    model = CollageModel()
    seen: List[str] = []

    def broken(_change):
        raise RuntimeError("boom")

    model.subscribe(broken)
    model.subscribe(lambda change: seen.append(change.kind))

    model.add_image("a")

    assert len(model) == 1
    assert seen == ["added"]
    assert "Model listener failed" in caplog.text


def test_concurrent_adds_keep_length_and_unique_tokens():
    model = CollageModel()
    per_thread = 200

    def worker(tag: int) -> None:
        for i in range(per_thread):
            model.add_image((tag, i))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(model) == 8 * per_thread
    assert len(set(model.tokens())) == len(model)
    for tag in range(8):
        own = [entry.image[1] for entry in model if entry.image[0] == tag]
        assert own == list(range(per_thread))
