import numpy as np
import pytest

from numberpairs.model.errors import InvariantError, PreconditionError
from numberpairs.model.token import AddendType, INACTIVE_POSITION


def _ids(tokens):
    return [t.id for t in tokens]


def _positions(tokens):
    return [t.position for t in tokens]


def test_initial_membership_draws_from_both_ends_of_the_pool(track):
    assert _ids(track.left_tokens) == [1, 2, 3]
    assert _ids(track.right_tokens) == [19, 20]
    assert _ids(track.inactive_tokens) == list(range(4, 19))
    assert all(t.position == INACTIVE_POSITION for t in track.inactive_tokens)

    assert track.divider_position == pytest.approx(16.2)
    assert _positions(track.left_tokens) == pytest.approx([12.7, 13.7, 14.7])
    assert _positions(track.right_tokens) == pytest.approx([17.7, 18.7])
    track.check_invariants(clearance=1.5)


def test_snapshot_is_detached_from_the_track(track):
    snapshot = track.snapshot()
    track.token_by_id(1).position = 2.0

    assert snapshot.left_count == 3 and snapshot.right_count == 2
    assert snapshot.positions(AddendType.LEFT) == pytest.approx([12.7, 13.7, 14.7])
    assert len(snapshot.tokens) == 20


def test_unknown_token_id(track):
    with pytest.raises(PreconditionError):
        track.token_by_id(99)


def test_counts_are_validated(make_track, track):
    with pytest.raises(PreconditionError):
        make_track(15, 6)
    with pytest.raises(PreconditionError):
        track.reconcile(-1, 2)
    with pytest.raises(PreconditionError):
        track.reconcile(12, 9)


# ------------------------------------------------------------------------------
# Reconcile
# ------------------------------------------------------------------------------

def test_growing_left_adds_on_the_outside(track):
    track.reconcile(4, 2)

    assert _ids(track.left_tokens) == [4, 1, 2, 3]
    assert _positions(track.left_tokens) == pytest.approx([11.7, 12.7, 13.7, 14.7])
    # the divider moved right by 0.4, so the right group keeps its buffer
    assert _positions(track.right_tokens) == pytest.approx([18.1, 19.1])
    track.check_invariants(clearance=1.5)


def test_growing_right_draws_from_the_back_of_the_pool(track):
    track.reconcile(3, 3)

    assert _ids(track.right_tokens) == [19, 20, 18]
    assert _positions(track.right_tokens) == pytest.approx([17.7, 18.7, 19.7])
    assert _positions(track.left_tokens) == pytest.approx([12.7, 13.7, 14.7])


def test_opposite_changes_move_the_innermost_bead_across(track):
    track.reconcile(4, 1)

    assert track.token_by_id(19).addend_type is AddendType.LEFT
    assert _ids(track.left_tokens) == [1, 2, 3, 19]
    assert _positions(track.left_tokens) == pytest.approx([12.1, 13.1, 14.1, 15.1])
    assert _positions(track.right_tokens) == pytest.approx([18.7])
    assert len(track.inactive_tokens) == 15
    track.check_invariants(clearance=1.5)


def test_opposite_changes_toward_the_right(track):
    track.reconcile(2, 3)

    assert track.token_by_id(3).addend_type is AddendType.RIGHT
    assert _ids(track.right_tokens) == [3, 19, 20]
    assert _positions(track.right_tokens) == pytest.approx([17.3, 18.3, 19.3])
    assert _positions(track.left_tokens) == pytest.approx([12.7, 13.7])


def test_shrinking_returns_tokens_to_the_front_of_the_pool(track):
    track.reconcile(1, 2)

    assert _ids(track.inactive_tokens)[:2] == [2, 1]
    assert track.token_by_id(1).addend_type is AddendType.INACTIVE
    assert track.token_by_id(1).position == INACTIVE_POSITION
    assert _positions(track.left_tokens) == pytest.approx([13.9])

    track.reconcile(3, 2)

    assert _ids(track.left_tokens) == [1, 2, 3]
    track.check_invariants(clearance=1.5)


def test_reconcile_to_the_same_counts_is_a_no_op(track):
    before = track.snapshot()
    track.reconcile(3, 2)
    assert track.snapshot() == before
    assert track.reconciling is False


def test_emptying_and_refilling(track):
    track.reconcile(0, 0)
    assert track.total == 0
    assert len(track.inactive_tokens) == 20

    track.reconcile(20, 0)
    assert track.left_count == 20
    track.check_invariants(clearance=1.5)

    track.reconcile(0, 20)
    assert track.right_count == 20
    track.check_invariants(clearance=1.5)


def test_random_reconcile_sequences_keep_the_track_settled(track, config):
    rng = np.random.default_rng(11)
    for _ in range(200):
        left = int(rng.integers(0, config.pool_size + 1))
        right = int(rng.integers(0, config.pool_size - left + 1))

        track.reconcile(left, right)

        assert (track.left_count, track.right_count) == (left, right)
        assert sorted(_ids(track.tokens)) == sorted(
            _ids(track.left_tokens) + _ids(track.right_tokens) + _ids(track.inactive_tokens)
        )
        track.check_invariants(clearance=config.divider_buffer)


# ------------------------------------------------------------------------------
# Layouts and invariants
# ------------------------------------------------------------------------------

def test_organize_groups_by_five(make_track):
    track = make_track(7, 3)
    track.organize()

    assert np.diff(_positions(track.left_tokens)) == pytest.approx([1, 1, 1, 1, 2, 1])
    assert _ids(track.left_tokens) == [1, 2, 3, 4, 5, 6, 7]
    track.check_invariants(clearance=1.5)


def test_reset_layout_restores_the_default_positions(track, engine):
    for token in track.active_tokens():
        token.position += 0.3
    track.reset_layout()

    left, right = engine.default_layout(3, 2)
    assert _positions(track.left_tokens) == pytest.approx(left)
    assert _positions(track.right_tokens) == pytest.approx(right)


def test_transfer_rejects_the_inactive_pool(track):
    with pytest.raises(PreconditionError):
        track.transfer(track.token_by_id(5), AddendType.LEFT)
    with pytest.raises(PreconditionError):
        track.transfer(track.token_by_id(1), AddendType.INACTIVE)
    with pytest.raises(PreconditionError):
        track.transfer(track.token_by_id(1), AddendType.LEFT)


def test_violations_are_reported(track):
    track.token_by_id(2).position = 14.5
    track.token_by_id(19).position = 16.0

    problems = track.violations()

    assert any("closer than one slot" in p for p in problems)
    assert any("right token left of divider" in p for p in problems)
    with pytest.raises(InvariantError):
        track.check_invariants()


def test_membership_mismatch_is_reported(track):
    track.token_by_id(1).addend_type = AddendType.RIGHT

    assert any("left collection" in p for p in track.violations())
