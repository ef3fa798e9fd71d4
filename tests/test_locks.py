"""Tests for the keyed in-process lock."""

import threading
import time

from leaderboard.locks import KeyedLock


def test_slot_is_released_after_use():
    locks = KeyedLock()
    with locks.hold(("board", 1)):
        assert len(locks) == 1
    assert len(locks) == 0


def test_slot_is_released_when_body_raises():
    locks = KeyedLock()
    try:
        with locks.hold("key"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert len(locks) == 0


def test_same_key_is_serialized():
    locks = KeyedLock()
    active = []
    overlaps = []

    def worker():
        with locks.hold((1, 1)):
            active.append(1)
            if len(active) > 1:
                overlaps.append(True)
            time.sleep(0.01)
            active.pop()

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert overlaps == []
    assert len(locks) == 0


def test_different_keys_do_not_block():
    locks = KeyedLock()
    entered = threading.Event()

    def other():
        with locks.hold((2, 2)):
            entered.set()

    with locks.hold((1, 1)):
        thread = threading.Thread(target=other)
        thread.start()
        assert entered.wait(timeout=2)
        thread.join()
