
import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

log = logging.getLogger(__name__)


class AbstractNode(ABC):
    """A named unit of work that runs `run()` on its own thread until stopped."""

    def __init__(self, node_id: str, kind: str):
        self.node_id = node_id
        self.kind = kind
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def start(self) -> bool:
        if self.running:
            return True
        self._stop.clear()
        self._thread = threading.Thread(target=self._run_wrapper, name=f"{self.node_id}-capture", daemon=True)
        self._thread.start()
        return True

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join()
            self._thread = None

    def _run_wrapper(self) -> None:
        try:
            self.run()
        except Exception:
            log.exception("%s node crashed", self.node_id)

    @abstractmethod
    def run(self) -> None:
        ...
