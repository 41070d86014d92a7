import pytest

from edl_engine.buffer import (
    Document,
    InitialDocIndex,
    Range,
    Transform,
    UnresolvablePositionError,
    resolve_index,
    resolve_range,
)


def test_no_transforms_leaves_offset_unchanged() -> None:
    assert resolve_index(10, []) == 10


def test_offsets_after_an_edit_shift_by_its_delta() -> None:
    transforms = [Transform(start=5, before_end=10, after_end=25)]

    assert resolve_index(3, transforms) == 3
    assert resolve_index(12, transforms) == 27
    assert resolve_index(10, transforms) == 25


def test_edit_start_boundary_is_unchanged() -> None:
    transforms = [Transform(start=5, before_end=10, after_end=25)]

    assert resolve_index(5, transforms) == 5


def test_offset_inside_replaced_text_cannot_resolve() -> None:
    transforms = [Transform(start=5, before_end=10, after_end=25)]

    with pytest.raises(UnresolvablePositionError, match="Cannot resolve position"):
        resolve_index(7, transforms)


def test_transforms_compose_in_order() -> None:
    transforms = [
        Transform(start=30, before_end=35, after_end=32),
        Transform(start=10, before_end=15, after_end=12),
    ]

    assert resolve_index(20, transforms) == 17
    assert resolve_index(40, transforms) == 34
    assert resolve_index(5, transforms) == 5


def test_initial_index_keeps_original_layout() -> None:
    document = Document("abcdef\nghijkl\nmnopqr\n")
    index = InitialDocIndex.capture(document)
    document.splice(Range(0, 6), "ABCDEFGHIJ")

    assert index.line_count == 4
    assert index.line_range(3) == Range(14, 20)
    assert index.offset_for(3, 2) == 16
    with pytest.raises(ValueError):
        index.offset_for(1, 7)


def test_resolve_range_moves_both_ends() -> None:
    transforms = [Transform(start=0, before_end=6, after_end=10)]

    assert resolve_range(Range(14, 20), transforms) == Range(18, 24)
