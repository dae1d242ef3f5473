"""
Decides whether the UI surface or the syncer reports progress.
"""
from .log_utils import log, LOGINFO
from .models import Mode


class ModeTracker:
    """
    The UI surface owns progress reporting while it is attached. If it was
    never attached, or goes away mid-session, the syncer takes over until the
    surface comes back.
    """

    def __init__(self, surface_attached_at_start=False):
        self.surface_attached_at_start = surface_attached_at_start
        self.surface_dropped_mid_session = False

    @property
    def mode(self):
        return Mode.UI_ACTIVE if self.surface_attached_at_start else Mode.AUTONOMOUS

    def evaluate(self, surface_present):
        """
        Apply the current surface signal.

        Returns True when ownership changed hands; the caller restarts the
        accounting clock on exactly those ticks.
        """
        if not surface_present and self.surface_attached_at_start:
            log("[MODE] UI surface closed - switching to autonomous sync tracking", LOGINFO)
            self.surface_attached_at_start = False
            self.surface_dropped_mid_session = True
            return True

        if surface_present and self.surface_dropped_mid_session:
            log("[MODE] UI surface re-opened - switching back to UI sync tracking", LOGINFO)
            self.surface_dropped_mid_session = False
            self.surface_attached_at_start = True
            return True

        return False
