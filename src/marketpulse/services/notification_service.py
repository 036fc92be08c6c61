"""
Survey Notification Service

Queues survey notifications while an operation runs and dispatches them
to observers once the operation commits. Notifications from a failed
operation are dropped with it.
"""

from typing import Callable

import structlog

from marketpulse.models.events import SurveyEvent

logger = structlog.get_logger(__name__)

Subscriber = Callable[[SurveyEvent], None]


class NotificationService:
    """
    Service for publishing survey notifications.

    Features:
    - Buffers notifications until the surrounding operation commits
    - Delivers to every subscriber in registration order
    - Keeps an ordered history of everything delivered
    - Isolates subscriber failures from committed state
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._pending: list[SurveyEvent] = []
        self.history: list[SurveyEvent] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register an observer.

        Returns:
            Callable that removes the observer again
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, event: SurveyEvent) -> None:
        """Queue a notification for delivery on commit."""
        self._pending.append(event)

    @property
    def pending(self) -> list[SurveyEvent]:
        return list(self._pending)

    def discard(self) -> None:
        """Drop queued notifications from an operation that failed."""
        if self._pending:
            logger.debug("notifications_discarded", count=len(self._pending))
        self._pending.clear()

    def flush(self) -> dict:
        """
        Deliver queued notifications.

        Returns:
            Dict with delivery stats
        """
        events, self._pending = self._pending, []
        sent = 0
        errors = 0

        for event in events:
            self.history.append(event)
            logger.info(event.name, **event.model_dump())

            for callback in list(self._subscribers):
                try:
                    callback(event)
                    sent += 1
                except Exception as e:
                    logger.error(
                        "notification_delivery_error",
                        notification=event.name,
                        survey_id=event.survey_id,
                        error=str(e),
                    )
                    errors += 1

        return {"events": len(events), "sent": sent, "errors": errors}
