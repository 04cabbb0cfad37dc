"""Producer classification policies.

Deciding whether a producer id belongs to a human or an agent is a host
configuration concern, so callers inject one of these classifiers instead
of the memory code matching on id strings itself.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from memmachine_node.memory.enums import ProducerRole
from memmachine_node.memory.models import ChatMessage, EpisodicRecord


class ProducerClassifier(ABC):
    """Maps a producer id to the conversation role that produced it."""

    @abstractmethod
    def classify(self, producer: str, hint: str | None = None) -> ProducerRole:
        """Classify a producer.

        Args:
            producer: Producer id as stored upstream
            hint: Upstream role hint (e.g. ``producer_role``), if any
        """

    def to_message(self, record: EpisodicRecord) -> ChatMessage:
        role = self.classify(record.producer, record.producer_role)
        return ChatMessage(
            type="human" if role is ProducerRole.USER else "ai",
            content=record.content,
        )


class UserIdClassifier(ProducerClassifier):
    """Producers containing one of the configured user ids are users."""

    def __init__(self, user_ids: Iterable[str]) -> None:
        self.user_ids = [uid for uid in user_ids if uid]

    def classify(self, producer: str, hint: str | None = None) -> ProducerRole:
        if hint == ProducerRole.USER.value:
            return ProducerRole.USER
        if producer and any(uid in producer for uid in self.user_ids):
            return ProducerRole.USER
        return ProducerRole.ASSISTANT


class KeywordClassifier(ProducerClassifier):
    """Producers containing a keyword (default ``agent``) are assistants."""

    def __init__(self, keyword: str = "agent") -> None:
        self.keyword = keyword

    def classify(self, producer: str, hint: str | None = None) -> ProducerRole:
        if hint in (ProducerRole.USER.value, ProducerRole.ASSISTANT.value):
            return ProducerRole(hint)
        if self.keyword and self.keyword in producer:
            return ProducerRole.ASSISTANT
        return ProducerRole.USER
