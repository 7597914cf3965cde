from __future__ import annotations

import threading

from app.application.ports.conversation_store import ConversationStorePort
from app.domain.entities.conversation_state import ConversationState


class MemoryConversationStore(ConversationStorePort):
    """Conversation progress lives only in process memory and is lost on restart."""

    def __init__(self, processed_limit: int = 1000) -> None:
        self._states: dict[str, ConversationState] = {}
        self._processed: dict[str, None] = {}
        self._processed_limit = processed_limit
        self._lock = threading.Lock()

    def get_state(self, thread_id: str) -> ConversationState | None:
        with self._lock:
            return self._states.get(thread_id)

    def set_state(self, thread_id: str, state: ConversationState) -> None:
        with self._lock:
            self._states[thread_id] = state

    def delete_state(self, thread_id: str) -> None:
        with self._lock:
            self._states.pop(thread_id, None)

    def has_processed(self, message_id: str) -> bool:
        with self._lock:
            return message_id in self._processed

    def mark_processed(self, message_id: str) -> None:
        with self._lock:
            self._processed[message_id] = None
            # Keep last N processed IDs
            while len(self._processed) > self._processed_limit:
                del self._processed[next(iter(self._processed))]
