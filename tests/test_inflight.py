"""Tests for in-flight request tracking."""

import pytest

from feedfuse.cache import InFlightTracker
from feedfuse.errors import AlreadyInFlightError


def test_track_claims_and_releases():
    tracker = InFlightTracker()
    with tracker.track("item-1"):
        assert tracker.is_in_flight("item-1")
        assert tracker.count() == 1
    assert not tracker.is_in_flight("item-1")
    assert tracker.count() == 0


def test_second_claim_is_refused():
    tracker = InFlightTracker()
    with tracker.track("item-1"):
        with pytest.raises(AlreadyInFlightError) as excinfo:
            with tracker.track("item-1"):
                pass
        assert excinfo.value.key == "item-1"
        # Other keys are independent
        with tracker.track("item-2"):
            assert tracker.count() == 2
    assert tracker.count() == 0


def test_released_when_block_raises():
    tracker = InFlightTracker()
    with pytest.raises(RuntimeError):
        with tracker.track("item-1"):
            raise RuntimeError("boom")
    assert not tracker.is_in_flight("item-1")


def test_clear():
    tracker = InFlightTracker()
    with tracker.track("a"):
        tracker.clear()
        assert tracker.count() == 0
