"""Enums for the memory domain."""

from enum import Enum


class EpisodeType(str, Enum):
    """Kind of episodic memory."""

    DIALOG = "dialog"
    SUMMARY = "summary"
    OBSERVATION = "observation"


class ProducerRole(str, Enum):
    """Which side of the conversation produced a message."""

    USER = "user"
    ASSISTANT = "assistant"
