from abs_progress_sync.mode_tracker import ModeTracker
from abs_progress_sync.models import Mode


def test_surface_absent_at_start_is_autonomous():
    tracker = ModeTracker(surface_attached_at_start=False)
    assert tracker.mode is Mode.AUTONOMOUS
    assert tracker.evaluate(False) is False
    assert tracker.mode is Mode.AUTONOMOUS


def test_surface_attached_at_start_is_ui_active():
    tracker = ModeTracker(surface_attached_at_start=True)
    assert tracker.mode is Mode.UI_ACTIVE
    assert tracker.evaluate(True) is False
    assert tracker.mode is Mode.UI_ACTIVE


def test_surface_drop_hands_over_to_autonomous():
    tracker = ModeTracker(surface_attached_at_start=True)

    assert tracker.evaluate(False) is True
    assert tracker.mode is Mode.AUTONOMOUS
    assert tracker.surface_dropped_mid_session is True

    # Still gone, no further transition
    assert tracker.evaluate(False) is False


def test_surface_return_hands_back_to_ui():
    tracker = ModeTracker(surface_attached_at_start=True)
    tracker.evaluate(False)

    assert tracker.evaluate(True) is True
    assert tracker.mode is Mode.UI_ACTIVE
    assert tracker.surface_dropped_mid_session is False


def test_surface_appearing_without_prior_drop_does_not_take_over():
    # Never attached at start: a surface showing up later has not dropped mid-session
    tracker = ModeTracker(surface_attached_at_start=False)
    assert tracker.evaluate(True) is False
    assert tracker.mode is Mode.AUTONOMOUS


def test_repeated_flapping_reports_every_transition():
    tracker = ModeTracker(surface_attached_at_start=True)
    signals = [True, False, False, True, True, False, True]
    transitions = [tracker.evaluate(s) for s in signals]
    assert transitions == [False, True, False, True, False, True, True]
