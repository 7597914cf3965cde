from abc import ABC, abstractmethod

from app.domain.entities.conversation_state import ConversationState


class ConversationStorePort(ABC):
    @abstractmethod
    def get_state(self, thread_id: str) -> ConversationState | None:
        raise NotImplementedError

    @abstractmethod
    def set_state(self, thread_id: str, state: ConversationState) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_state(self, thread_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def has_processed(self, message_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def mark_processed(self, message_id: str) -> None:
        raise NotImplementedError
