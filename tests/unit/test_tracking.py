"""Field edit tracker tests."""

from freightflow.tracking import FieldEditTracker


def test_mark_edited_is_idempotent():
    tracker = FieldEditTracker()
    tracker.mark_edited("city")
    tracker.mark_edited("city")

    assert tracker.is_edited("city")
    assert len(tracker) == 1
    assert not tracker.is_edited("state")


def test_reset_clears_all_edits():
    tracker = FieldEditTracker()
    tracker.mark_edited("city")
    tracker.mark_edited("consignee.address.postalCd")

    tracker.reset()

    assert len(tracker) == 0
    assert not tracker.is_edited("city")


def test_tracker_shares_backing_set():
    backing = {"city"}
    tracker = FieldEditTracker(backing)
    tracker.mark_edited("state")

    assert backing == {"city", "state"}
    assert "city" in tracker
    assert list(tracker) == ["city", "state"]
    assert tracker.edited_fields == frozenset({"city", "state"})


def test_parent_edit_covers_nested_fields():
    tracker = FieldEditTracker()
    tracker.mark_edited("commodities")

    assert tracker.is_edited("commodities.0.pieceCnt")
    assert tracker.is_edited("commodities.0.grossWeight.weight")
    assert not tracker.is_edited("commoditiesNote")
    assert "commodities.0.pieceCnt" not in tracker
