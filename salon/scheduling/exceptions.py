class SchedulingError(Exception):
    """Base class for scheduling rule violations"""


class InvalidIntervalError(SchedulingError):
    """Raised when an interval ends at or before its start, or after midnight"""


class UnknownServiceError(SchedulingError):
    """Raised when a selected service id is missing and the policy is 'reject'"""

    def __init__(self, service_ids):
        self.service_ids = list(service_ids)
        super().__init__(f"Unknown service id(s): {', '.join(str(s) for s in self.service_ids)}")


class SlotUnavailableError(SchedulingError):
    """Raised when a requested interval collides with an active appointment"""

    def __init__(self, message="The requested time is no longer available.", conflicting_ids=None):
        self.conflicting_ids = list(conflicting_ids or [])
        super().__init__(message)
