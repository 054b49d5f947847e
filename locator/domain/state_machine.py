# Local application imports
from .exceptions import InvalidStateTransitionError
from .models.tracking_session import TrackingStatus


class TrackingStateMachine:
    """
    Legal status transitions for a tracking session.

    REQUESTED may be re-entered from anywhere since a new request always
    supersedes the previous answer. OK and ERROR are accepted from any state
    so devices can report without a pending request. Nothing returns to
    WAITING.
    """
    ALLOWED_TRANSITIONS = {
        TrackingStatus.WAITING: [TrackingStatus.REQUESTED, TrackingStatus.OK, TrackingStatus.ERROR],
        TrackingStatus.REQUESTED: [TrackingStatus.REQUESTED, TrackingStatus.OK, TrackingStatus.ERROR],
        TrackingStatus.OK: [TrackingStatus.REQUESTED, TrackingStatus.OK, TrackingStatus.ERROR],
        TrackingStatus.ERROR: [TrackingStatus.REQUESTED, TrackingStatus.OK, TrackingStatus.ERROR],
    }

    @staticmethod
    def can_transition(current_status: str, new_status: str) -> bool:
        try:
            curr = TrackingStatus(current_status)
            new = TrackingStatus(new_status)
            return new in TrackingStateMachine.ALLOWED_TRANSITIONS.get(curr, [])
        except ValueError:
            return False

    @staticmethod
    def ensure_transition(current_status: str, new_status: str) -> None:
        if not TrackingStateMachine.can_transition(current_status, new_status):
            raise InvalidStateTransitionError(
                getattr(current_status, "value", current_status),
                getattr(new_status, "value", new_status),
            )
