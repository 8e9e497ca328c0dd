
import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Type

from pydantic import BaseModel

log = logging.getLogger(__name__)

Callback = Callable[[BaseModel], None]


class Topic:
    def __init__(self, name: str, msg_type: Type[BaseModel], depth: int):
        self.name = name
        self.msg_type = msg_type
        self.ring: Deque[BaseModel] = deque(maxlen=depth)
        self.latest: Optional[BaseModel] = None
        self.subscribers: List[Callback] = []
        self.count = 0


class Publisher:
    def __init__(self, bus: "MessageBus", topic: Topic):
        self._bus = bus
        self.topic = topic

    def publish(self, msg: BaseModel) -> None:
        if not isinstance(msg, self.topic.msg_type):
            raise TypeError(f"{self.topic.name} carries {self.topic.msg_type.__name__}, got {type(msg).__name__}")
        self._bus._deliver(self.topic, msg)


class MessageBus:
    """In-process typed pub/sub.

    Each topic keeps its latest message and a bounded history ring of
    `depth` messages. Subscribers are called on the publisher's thread.
    """

    def __init__(self, depth: int = 10):
        self.depth = depth
        self._topics: Dict[str, Topic] = {}
        self._lock = threading.Lock()

    def _topic(self, name: str, msg_type: Type[BaseModel]) -> Topic:
        with self._lock:
            topic = self._topics.get(name)
            if topic is None:
                topic = Topic(name, msg_type, self.depth)
                self._topics[name] = topic
            elif topic.msg_type is not msg_type:
                raise TypeError(f"topic {name} already carries {topic.msg_type.__name__}")
            return topic

    def create_publisher(self, name: str, msg_type: Type[BaseModel]) -> Publisher:
        return Publisher(self, self._topic(name, msg_type))

    def subscribe(self, name: str, msg_type: Type[BaseModel], callback: Callback) -> None:
        topic = self._topic(name, msg_type)
        with self._lock:
            topic.subscribers.append(callback)

    def _deliver(self, topic: Topic, msg: BaseModel) -> None:
        with self._lock:
            topic.latest = msg
            topic.ring.append(msg)
            topic.count += 1
            subscribers = list(topic.subscribers)
        for cb in subscribers:
            try:
                cb(msg)
            except Exception:
                log.exception("subscriber of %s failed", topic.name)

    def topics(self) -> List[str]:
        with self._lock:
            return sorted(self._topics)

    def latest(self, name: str) -> Optional[Any]:
        topic = self._topics.get(name)
        return topic.latest if topic else None

    def history(self, name: str, limit: int = 100) -> List[Any]:
        topic = self._topics.get(name)
        if not topic:
            return []
        with self._lock:
            return list(topic.ring)[-limit:]

    def count(self, name: str) -> int:
        topic = self._topics.get(name)
        return topic.count if topic else 0
