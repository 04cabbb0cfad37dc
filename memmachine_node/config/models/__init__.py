"""Configuration section models."""

from memmachine_node.config.models.api import MemMachineAPIConfig
from memmachine_node.config.models.memory import MemoryConfig
from memmachine_node.config.models.observability import (
    ObservabilityConfig,
    TraceFormat,
    TraceVerbosity,
)

__all__ = [
    "MemMachineAPIConfig",
    "MemoryConfig",
    "ObservabilityConfig",
    "TraceFormat",
    "TraceVerbosity",
]
