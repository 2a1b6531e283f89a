"""Class feed - shared resources and the class chatroom."""

import logging
import uuid
from datetime import date
from typing import List, Optional

from core.models import ChatMessage, ClassResource, Learner, now_ms

logger = logging.getLogger(__name__)

RESOURCES_TOPIC = "resources"
CHAT_TOPIC = "chat"

RESOURCE_TYPES = ("note", "homework", "pdf")


class ClassFeed:
    def __init__(self, store, notifier):
        self.store = store
        self.notifier = notifier

    # ==================== Resources ====================

    def resources(self) -> List[ClassResource]:
        """Resources, newest first."""
        return self.store.list_resources()

    def post_resource(self, title: str, content: str = "", type: str = "note",
                      file_url: Optional[str] = None, file_name: Optional[str] = None) -> ClassResource:
        if not title or not title.strip():
            raise ValueError("Resource title is empty")
        if type not in RESOURCE_TYPES:
            raise ValueError(f"Unknown resource type {type!r}")

        resource = ClassResource(
            id=str(uuid.uuid4()),
            title=title.strip(),
            type=type,
            content=content,
            date=date.today().isoformat(),
            file_url=file_url,
            file_name=file_name,
        )
        self.store.add_resource(resource)
        logger.info("Resource posted: %s (%s)", resource.title, resource.type)
        self.notifier.publish(RESOURCES_TOPIC, {"event": "posted", "resource": resource.to_dict()})
        return resource

    # ==================== Chat ====================

    def messages(self) -> List[ChatMessage]:
        """Chat history, oldest first."""
        return self.store.list_messages()

    def send_message(self, sender: Learner, text: str) -> ChatMessage:
        if not text or not text.strip():
            raise ValueError("Message text is empty")

        message = ChatMessage(
            id=str(uuid.uuid4()),
            sender_id=sender.id,
            sender_name=sender.name,
            role=sender.role,
            text=text.strip(),
            timestamp=now_ms(),
        )
        self.store.add_message(message)
        self.notifier.publish(CHAT_TOPIC, {"event": "message", "message": message.to_dict()})
        return message
