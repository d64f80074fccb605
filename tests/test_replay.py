import pytest

from wgprimitives.replay import WINDOW_SIZE, ReplayFilter

REJECT_AFTER_MESSAGES = (1 << 64) - (1 << 13) - 1
T_LIM = WINDOW_SIZE + 1


@pytest.fixture
def replay_filter():
    f = ReplayFilter()
    f.reset()
    return f


def _check(f, sequence):
    for number, (counter, expected) in enumerate(sequence, start=1):
        got = f.validate_counter(counter, REJECT_AFTER_MESSAGES)
        assert got is expected, f"step {number}: counter {counter}"


def test_window_size_bounds_accepted_counters(replay_filter):
    assert WINDOW_SIZE == 8128
    assert replay_filter.validate_counter(WINDOW_SIZE + 1, REJECT_AFTER_MESSAGES) is True
    # Exactly WINDOW_SIZE behind the newest counter is still inside the window.
    assert replay_filter.validate_counter(1, REJECT_AFTER_MESSAGES) is True
    # One further back falls outside.
    assert replay_filter.validate_counter(0, REJECT_AFTER_MESSAGES) is False


def test_kernel_sequence(replay_filter):
    r = REJECT_AFTER_MESSAGES
    _check(
        replay_filter,
        [
            (0, True),
            (1, True),
            (1, False),
            (9, True),
            (8, True),
            (7, True),
            (7, False),
            (T_LIM, True),
            (T_LIM - 1, True),
            (T_LIM - 1, False),
            (T_LIM - 2, True),
            (2, True),
            (2, False),
            (T_LIM + 16, True),
            (3, False),
            (T_LIM + 16, False),
            (T_LIM * 4, True),
            (T_LIM * 4 - (T_LIM - 1), True),
            (10, False),
            (T_LIM * 4 - T_LIM, False),
            (T_LIM * 4 - (T_LIM + 1), False),
            (T_LIM * 4 - (T_LIM - 2), True),
            (T_LIM * 4 + 1 - T_LIM, False),
            (0, False),
            (r, False),
            (r - 1, True),
            (r, False),
            (r - 1, False),
            (r - 2, True),
            (r + 1, False),
            (r + 2, False),
            (r - 2, False),
            (r - 3, True),
            (0, False),
        ],
    )


def test_bulk_sequences_share_one_filter():
    f = ReplayFilter()

    f.reset()
    _check(f, [(i, True) for i in range(1, WINDOW_SIZE + 1)])
    _check(f, [(0, True), (0, False)])

    f.reset()
    _check(f, [(i, True) for i in range(2, WINDOW_SIZE + 2)])
    _check(f, [(1, True), (0, False)])

    f.reset()
    _check(f, [(i, True) for i in range(WINDOW_SIZE + 1, 0, -1)])

    f.reset()
    _check(f, [(i, True) for i in range(WINDOW_SIZE + 2, 1, -1)])
    _check(f, [(0, False)])

    f.reset()
    _check(f, [(i, True) for i in range(WINDOW_SIZE, 0, -1)])
    _check(f, [(WINDOW_SIZE + 1, True), (0, False)])

    f.reset()
    _check(f, [(i, True) for i in range(WINDOW_SIZE, 0, -1)])
    _check(f, [(0, True), (WINDOW_SIZE + 1, True)])


def test_counter_at_limit_is_rejected(replay_filter):
    assert replay_filter.validate_counter(5, 5) is False
    assert replay_filter.validate_counter(4, 5) is True