import pytest

from numberpairs.controller.store import BeadLineStore, DragState
from numberpairs.model.errors import PreconditionError
from numberpairs.model.partitioned_track import TrackSnapshot
from numberpairs.model.token import AddendType


@pytest.fixture
def store(qapp, config):
    return BeadLineStore(3, 2, config)


@pytest.fixture
def recorded(store):
    """Every signal the store emits, by name."""
    log = {"positions": [], "divider": [], "states": [], "addends": []}
    store.positions_changed.connect(log["positions"].append)
    store.divider_changed.connect(log["divider"].append)
    store.drag_state_changed.connect(log["states"].append)
    store.addends_changed.connect(lambda left, right: log["addends"].append((left, right)))
    return log


def test_addend_change_reconciles_and_publishes(store, recorded):
    store.on_addend_counts_changed(4, 2)

    assert recorded["states"] == [DragState.RECONCILING, DragState.SETTLED]
    assert recorded["divider"] == [pytest.approx(16.6)]
    assert len(recorded["positions"]) == 1
    snapshot = recorded["positions"][0]
    assert isinstance(snapshot, TrackSnapshot)
    assert (snapshot.left_count, snapshot.right_count) == (4, 2)
    # the source of the counts already knows them
    assert recorded["addends"] == []


def test_unchanged_counts_publish_nothing(store, recorded):
    store.on_addend_counts_changed(3, 2)

    assert recorded == {"positions": [], "divider": [], "states": [], "addends": []}


def test_drag_input_is_ignored_while_reconciling(store):
    answers = []

    def drag_during_reconcile(state):
        if state is DragState.RECONCILING:
            answers.append(store.on_drag_proposed(3, 10.0))
            answers.append(store.on_home_command(20))

    store.drag_state_changed.connect(drag_during_reconcile)
    store.on_addend_counts_changed(5, 5)

    assert answers == [None, None]
    assert store.is_settled
    assert store.dragged_token_id is None
    assert (store.track.left_count, store.track.right_count) == (5, 5)
    store.track.check_invariants(clearance=1.5)


def test_drag_across_the_divider_reports_the_new_split(store, recorded):
    result = store.on_drag_proposed(19, 15.0)

    assert result.transferred == [19]
    assert store.drag_state is DragState.DRAGGING
    assert store.dragged_token_id == 19
    assert recorded["addends"] == [(4, 1)]
    assert recorded["divider"] == [pytest.approx(16.6)]

    store.on_drag_released(19)

    assert store.is_settled
    assert store.dragged_token_id is None
    assert recorded["states"] == [DragState.DRAGGING, DragState.SETTLED]


def test_drag_without_crossing_keeps_the_divider(store, recorded):
    store.on_drag_proposed(3, 13.0)

    assert recorded["divider"] == []
    assert recorded["addends"] == []
    assert len(recorded["positions"]) == 1


def test_a_second_token_is_ignored_during_a_drag(store):
    store.on_drag_proposed(3, 13.0)
    before = store.snapshot()

    assert store.on_drag_proposed(1, 5.0) is None
    assert store.on_end_command(1) is None
    assert store.on_drag_released(2) is None
    assert store.snapshot() == before
    assert store.dragged_token_id == 3


def test_addend_change_interrupts_a_drag(store):
    store.on_drag_proposed(3, 13.0)
    store.on_addend_counts_changed(4, 2)

    assert store.is_settled
    assert store.dragged_token_id is None
    store.track.check_invariants(clearance=1.5)


def test_end_command(store, recorded):
    result = store.on_end_command(3)

    assert result.transferred == [3]
    assert recorded["addends"] == [(2, 3)]
    assert store.track.token_by_id(3).addend_type is AddendType.RIGHT
    assert store.is_settled


def test_home_command_on_a_left_bead_keeps_the_split(store, recorded):
    store.on_home_command(1)

    assert recorded["addends"] == []
    assert store.track.left_count == 3


def test_reset_restores_the_default_layout(store):
    store.on_drag_proposed(3, 13.0)
    store.on_reset_command()

    left, right = store.engine.default_layout(3, 2)
    snapshot = store.snapshot()
    assert store.is_settled
    assert snapshot.positions(AddendType.LEFT) == pytest.approx(left)
    assert snapshot.positions(AddendType.RIGHT) == pytest.approx(right)


def test_organize_publishes_grouped_positions(qapp, config):
    store = BeadLineStore(7, 3, config)
    published = []
    store.positions_changed.connect(published.append)

    store.on_organize_command()

    assert len(published) == 1
    left = published[0].positions(AddendType.LEFT)
    assert [b - a for a, b in zip(left, left[1:])] == pytest.approx([1, 1, 1, 1, 2, 1])


def test_failed_drag_leaves_the_store_settled(store):
    with pytest.raises(PreconditionError):
        store.on_drag_proposed(5, 3.0)

    assert store.is_settled
    assert store.dragged_token_id is None
