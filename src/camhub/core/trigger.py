
import logging
import threading

from .schemas import TriggerResponse

log = logging.getLogger(__name__)

TRIGGER_MESSAGE = "Capture triggered"


class TriggerGate:
    """Gates frame publication on external trigger requests in sync mode.

    At most one pending trigger is remembered. A trigger that races with
    the loop clearing the flag may be absorbed by that publish.
    """

    def __init__(self, sync_mode: bool = False):
        self.sync_mode = sync_mode
        self._pending = threading.Event()

    @property
    def pending(self) -> bool:
        return self._pending.is_set()

    def request_trigger(self) -> TriggerResponse:
        log.debug("Received trigger request")
        self._pending.set()
        return TriggerResponse(success=True, message=TRIGGER_MESSAGE)

    def should_publish(self) -> bool:
        if self.sync_mode and not self._pending.is_set():
            return False
        self._pending.clear()
        return True
