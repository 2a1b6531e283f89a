"""
Poll Board - live polls run by the teacher.

One poll is active at a time. Each student votes once. Every change is
published on the "poll" topic.
"""

import logging
import threading
import uuid
from typing import List, Optional

from core.errors import InvalidVote, PollClosed
from core.models import Poll

logger = logging.getLogger(__name__)

POLL_TOPIC = "poll"


def parse_options(raw: str) -> List[str]:
    """Split comma-separated teacher input into options."""
    return [part.strip() for part in raw.split(",") if part.strip()]


class PollBoard:
    def __init__(self, store, notifier):
        self.store = store
        self.notifier = notifier
        self._lock = threading.Lock()

    def active(self) -> Optional[Poll]:
        return self.store.get_poll()

    def start(self, question: str, options: List[str]) -> Poll:
        """Start a poll, replacing any active one."""
        cleaned = [o.strip() for o in options if o and o.strip()]
        if not question or not question.strip():
            raise InvalidVote("Poll question is empty")
        if len(cleaned) < 2:
            raise InvalidVote("A poll needs at least two options")

        poll = Poll(
            id=str(uuid.uuid4()),
            question=question.strip(),
            options=cleaned,
            responses={i: 0 for i in range(len(cleaned))},
        )
        with self._lock:
            self.store.set_poll(poll)

        logger.info("Poll %s started with %d options", poll.id, len(cleaned))
        self.notifier.publish(POLL_TOPIC, {"event": "started", "poll": poll.to_dict()})
        return poll

    def vote(self, student_id: str, option_index: int) -> Poll:
        """
        Record one student's vote.

        Raises:
            PollClosed: No active poll
            InvalidVote: Bad option index or repeat vote
        """
        with self._lock:
            poll = self.store.get_poll()
            if poll is None or not poll.active:
                raise PollClosed("No active poll")
            if not 0 <= option_index < len(poll.options):
                raise InvalidVote(f"Option {option_index} is out of range")
            if student_id in poll.voters:
                raise InvalidVote(f"{student_id} has already voted")

            poll.responses[option_index] = poll.responses.get(option_index, 0) + 1
            poll.voters.append(student_id)
            self.store.set_poll(poll)

        self.notifier.publish(POLL_TOPIC, {"event": "vote", "poll": poll.to_dict()})
        return poll

    def end(self) -> Optional[Poll]:
        """Close the active poll and return its final state."""
        with self._lock:
            poll = self.store.get_poll()
            self.store.clear_poll()

        if poll is None:
            return None
        poll.active = False
        logger.info("Poll %s ended with %d votes", poll.id, poll.total_votes)
        self.notifier.publish(POLL_TOPIC, {"event": "ended", "poll": poll.to_dict()})
        return poll
