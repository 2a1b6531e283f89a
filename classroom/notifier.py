"""
Notifier - publish/subscribe for classroom state changes.

Delivery semantics:
    - Synchronous: publish() returns after every local subscriber ran
    - Ordered: subscribers run in subscription order
    - At-most-once: a subscriber that raises is logged and skipped, never retried
    - Only subscribers registered at publish time receive the event

RedisNotifier also forwards each event to the Redis channel classroom:{topic}
so other processes can listen.
"""

import json
import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

Callback = Callable[[str, dict], None]

CHANNEL_PREFIX = "classroom"


def learner_topic(learner_id: str) -> str:
    return f"learner:{learner_id}"


class Notifier:
    """In-process topic broadcaster."""

    def __init__(self):
        self._subscribers: Dict[str, List[Callback]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, topic: str, callback: Callback) -> Callable[[], None]:
        """
        Register a callback for a topic.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers[topic].append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers.get(topic, []):
                    self._subscribers[topic].remove(callback)

        return unsubscribe

    def publish(self, topic: str, payload: dict) -> int:
        """
        Deliver an event to the topic's current subscribers.

        Returns:
            Number of subscribers that handled the event
        """
        with self._lock:
            targets = list(self._subscribers.get(topic, []))

        delivered = 0
        for callback in targets:
            try:
                callback(topic, payload)
                delivered += 1
            except Exception:
                logger.exception("Subscriber for %r failed", topic)
        return delivered


class RedisNotifier(Notifier):
    """Notifier that also publishes to Redis pub/sub."""

    def __init__(self, client):
        super().__init__()
        self.client = client

    def _channel(self, topic: str) -> str:
        return f"{CHANNEL_PREFIX}:{topic}"

    def publish(self, topic: str, payload: dict) -> int:
        delivered = super().publish(topic, payload)
        try:
            self.client.publish(self._channel(topic), json.dumps({"topic": topic, "payload": payload}))
        except Exception:
            logger.exception("Forwarding %r to Redis failed", topic)
        return delivered
