"""
Conversation Session Store - in-memory chat threads keyed by thread id.

The store exclusively owns every session. Callers get session objects back
for reading, but only the store appends to them or removes them.
"""

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

USER = "user"
ASSISTANT = "assistant"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def new_thread_id() -> str:
    return f"thread_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


@dataclass
class Message:
    role: str
    content: str
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self):
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp}


@dataclass
class ConversationSession:
    thread_id: str
    customer_id: str
    messages: List[Message] = field(default_factory=list)
    created_at: str = field(default_factory=utc_timestamp)

    def history(self) -> List[Dict[str, str]]:
        """Role/content pairs in order, as handed to the language model."""
        return [{"role": m.role, "content": m.content} for m in self.messages]

    def to_dict(self):
        return {
            "threadId": self.thread_id,
            "customerId": self.customer_id,
            "messages": [m.to_dict() for m in self.messages],
        }


class ConversationStore:
    def __init__(self):
        self._sessions: Dict[str, ConversationSession] = {}
        self._lock = threading.Lock()

    def create_or_append(self, thread_id: Optional[str], customer_id: str, message: str) -> Tuple[str, ConversationSession]:
        """
        Record a user message, starting a new thread when needed.

        An absent or unknown thread id gets a freshly generated one. A known
        thread keeps the customer id it was created with.

        Args:
            thread_id: Existing thread id, or None
            customer_id: Customer the message is from
            message: The user's text

        Returns:
            (thread_id, session) for the thread the message was appended to
        """
        with self._lock:
            session = self._sessions.get(thread_id) if thread_id else None
            if session is None:
                if thread_id:
                    logger.info(f"Unknown thread {thread_id}; starting a new conversation")
                thread_id = new_thread_id()
                while thread_id in self._sessions:
                    thread_id = new_thread_id()
                session = ConversationSession(thread_id=thread_id, customer_id=customer_id)
                self._sessions[thread_id] = session
                logger.info(f"Created conversation {thread_id} for customer {customer_id}")
            elif session.customer_id != customer_id:
                logger.warning(
                    f"Thread {thread_id} belongs to {session.customer_id}; ignoring customer id {customer_id}"
                )

            session.messages.append(Message(USER, message))
            return thread_id, session

    def append_assistant(self, thread_id: str, content: str) -> Optional[Message]:
        """Append the assistant's reply; returns None if the thread was deleted meanwhile."""
        with self._lock:
            session = self._sessions.get(thread_id)
            if session is None:
                logger.warning(f"Conversation {thread_id} disappeared before the reply was stored")
                return None
            message = Message(ASSISTANT, content)
            session.messages.append(message)
            return message

    def get(self, thread_id: str) -> Optional[ConversationSession]:
        with self._lock:
            return self._sessions.get(thread_id)

    def delete(self, thread_id: str) -> bool:
        with self._lock:
            existed = self._sessions.pop(thread_id, None) is not None
        if existed:
            logger.info(f"Deleted conversation {thread_id}")
        return existed

    def __len__(self):
        with self._lock:
            return len(self._sessions)
