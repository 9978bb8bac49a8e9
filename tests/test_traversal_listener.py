"""Tests for flattening traversal events into a navigation index."""

import pytest

from pgnbrowser.models.traversal_events import EnterVariation, ExitVariation, VisitPly
from pgnbrowser.services.traversal_listener import TraversalContractError, TraversalListener


def ply(move_text, ply_number, level=0, tags=(), comment=None):
    return VisitPly(move_text, tuple(tags), comment, ply_number, level)


# 1. e4 e5 2. Nf3 (2. Bc4 Nc6) Nf6
EXAMPLE_EVENTS = [
    ply("e4", 0),
    ply("e5", 1),
    ply("Nf3", 2),
    EnterVariation(1),
    ply("Bc4", 2, level=1),
    ply("Nc6", 3, level=1),
    ExitVariation(1),
    ply("Nf6", 3),
]


def test_single_line_back_pointers(position):
    """A line without variations points every ply at its predecessor."""
    events = [ply(f"m{i}", i) for i in range(7)]
    index = TraversalListener(position).build(events)

    assert index.count == 8
    assert index.back_pointers == [0, 0, 1, 2, 3, 4, 5, 6]
    assert index.levels == [0] * 8
    for i in range(1, index.count - 1):
        assert index.go_forward(i) == i + 1


def test_example_game_flattening(position):
    index = TraversalListener(position).build(EXAMPLE_EVENTS)

    assert [p.move_text for p in index.plies] == ["", "e4", "e5", "Nf3", "Bc4", "Nc6", "Nf6"]
    assert index.back_pointers == [0, 0, 1, 2, 3, 4, 3]
    assert index.levels == [0, 0, 0, 0, 1, 1, 0]
    assert index.go_backward(6) == 3
    assert index.go_backward(4) == 3
    assert index.go_forward(4) == 5


def test_back_pointer_precedes_index(position):
    events = [
        ply("e4", 0),
        EnterVariation(1),
        ply("d4", 0, level=1),
        EnterVariation(2),
        ply("c4", 0, level=2),
        ply("e5", 1, level=2),
        ExitVariation(2),
        ply("d5", 1, level=1),
        ExitVariation(1),
        ply("e5", 1),
    ]
    index = TraversalListener(position).build(events)

    assert index.back_pointers[0] == 0
    for n in range(1, index.count):
        assert index.back_pointers[n] < n


def test_line_start_and_end_flags(position):
    index = TraversalListener(position).build(EXAMPLE_EVENTS)
    plies = index.plies

    assert [p.line_start for p in plies] == [False, False, False, False, True, False, False]
    assert [p.line_end for p in plies] == [False, False, False, False, False, True, False]
    assert plies[4].variations_opened == 1
    assert plies[5].variations_closed == 1
    assert sum(p.variations_opened for p in plies) == sum(p.variations_closed for p in plies)


def test_nested_variation_brackets(position):
    """The inner line closes on its own last ply, the outer one after it."""
    events = [
        ply("e4", 0),
        ply("e5", 1),
        EnterVariation(1),
        ply("c5", 1, level=1),
        EnterVariation(2),
        ply("c6", 1, level=2),
        ExitVariation(2),
        ExitVariation(1),
    ]
    index = TraversalListener(position).build(events)
    plies = index.plies

    assert plies[3].line_start and plies[3].line_end
    assert plies[4].line_start and plies[4].line_end
    assert plies[4].variations_closed == 2
    assert plies[3].variations_closed == 0
    # a side line continues from the last ply emitted on its parent line
    assert index.back_pointers == [0, 0, 1, 2, 3]


def test_move_number_display_flags(position):
    index = TraversalListener(position).build(EXAMPLE_EVENTS)
    shown = [p.show_move_number for p in index.plies[1:]]

    # e4, Nf3 (White), Bc4 (line start), Nf6 (after line end)
    assert shown == [True, False, True, True, False, True]
    assert [p.move_number for p in index.plies[1:]] == [1, 1, 2, 2, 2, 2]
    assert [p.is_white for p in index.plies[1:]] == [True, False, True, True, False, False]


def test_annotation_forces_next_move_number(position):
    events = [ply("e4", 0, tags=["!"]), ply("e5", 1), ply("Nf3", 2)]
    index = TraversalListener(position).build(events)

    assert index.plies[2].show_move_number is True
    assert index.plies[1].annotation_tags == ("!",)


def test_text_fields_pass_through_verbatim(position):
    events = [ply("e4", 0, comment="<b>best</b> by test")]
    index = TraversalListener(position).build(events)

    assert index.plies[1].comment == "<b>best</b> by test"
    assert index.plies[0].move_text == ""
    assert index.plies[0].comment is None


def test_snapshot_taken_at_visit_time(position):
    listener = TraversalListener(position)
    listener.begin()
    position.stones[0] = 12
    listener.dispatch(ply("e4", 0))
    position.stones[0] = 0
    listener.dispatch(ply("e5", 1))
    position.stones[0] = 3
    index = listener.finish()

    assert [s.stone_at(0) for s in index.snapshots] == [6, 12, 0]


def test_unbounded_nesting_depth(position):
    depth = 250
    events = [ply("e4", 0)]
    for level in range(1, depth + 1):
        events.append(EnterVariation(level))
        events.append(ply(f"v{level}", level % 2, level=level))
    for level in range(depth, 0, -1):
        events.append(ExitVariation(level))

    index = TraversalListener(position).build(events)

    assert index.count == depth + 2
    assert index.levels[-1] == depth
    assert index.plies[-1].variations_closed == depth


def test_sibling_variations_share_branch_point(position):
    events = [
        ply("e4", 0),
        ply("e5", 1),
        EnterVariation(1),
        ply("c5", 1, level=1),
        ExitVariation(1),
        EnterVariation(1),
        ply("e6", 1, level=1),
        ExitVariation(1),
    ]
    index = TraversalListener(position).build(events)

    assert index.back_pointers == [0, 0, 1, 2, 2]
    assert index.go_forward(2) == 4


def test_empty_variation_leaves_no_brackets(position):
    events = [ply("e4", 0), EnterVariation(1), ExitVariation(1), ply("e5", 1)]
    index = TraversalListener(position).build(events)
    plies = index.plies

    assert index.back_pointers == [0, 0, 1]
    assert plies[2].variations_opened == 0
    assert plies[2].line_start is False
    assert sum(p.variations_closed for p in plies) == 0


def test_exit_without_enter_fails_fast(position):
    listener = TraversalListener(position)
    listener.begin()
    listener.dispatch(ply("e4", 0))

    with pytest.raises(TraversalContractError):
        listener.dispatch(ExitVariation(1))
    assert not listener.in_progress


def test_mismatched_exit_level_fails(position):
    events = [ply("e4", 0), EnterVariation(1), ply("d4", 0, level=1), ExitVariation(2)]
    with pytest.raises(TraversalContractError):
        TraversalListener(position).build(events)


def test_visit_at_unopened_level_fails(position):
    with pytest.raises(TraversalContractError):
        TraversalListener(position).build([ply("e4", 0), ply("d4", 0, level=1)])


def test_enter_skipping_a_level_fails(position):
    with pytest.raises(TraversalContractError):
        TraversalListener(position).build([ply("e4", 0), EnterVariation(2)])


def test_unclosed_variation_fails_on_finish(position):
    with pytest.raises(TraversalContractError):
        TraversalListener(position).build([ply("e4", 0), EnterVariation(1), ply("d4", 0, level=1)])


def test_contract_error_is_runtime_error(position):
    with pytest.raises(RuntimeError):
        TraversalListener(position).build([ExitVariation(1)])


def test_unknown_event_rejected(position):
    listener = TraversalListener(position)
    listener.begin()
    with pytest.raises(TypeError):
        listener.dispatch("e4")


def test_lifecycle_misuse(position):
    listener = TraversalListener(position)
    with pytest.raises(RuntimeError):
        listener.dispatch(ply("e4", 0))

    listener.begin()
    with pytest.raises(RuntimeError):
        listener.begin()


def test_listener_reusable_after_finish(position):
    listener = TraversalListener(position)
    first = listener.build(EXAMPLE_EVENTS)
    second = listener.build([ply("d4", 0)])

    assert first.count == 7
    assert second.count == 2
    assert second.back_pointers == [0, 0]


def test_empty_game_has_start_only(position):
    index = TraversalListener(position).build([])

    assert index.count == 1
    assert index.go_forward(0) == 0
    assert index.go_backward(0) == 0
