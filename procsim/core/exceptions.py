"""Errors raised by the simulation kernel."""


class CausalityViolation(ValueError):
    """Raised when an event is admitted at a time earlier than the current clock.

    Only the offending ``schedule_event`` call fails; the event queue is left
    untouched and the rest of the run is unaffected.
    """

    def __init__(self, event, current_time: float):
        self.event = event
        self.current_time = current_time
        super().__init__(
            f"Event scheduled at a point in time in the past: {event.id} "
            f"(scheduled at: {event.scheduled_at}; current time: {current_time})"
        )
