"""Workflow node shell: parameter parsing, operations and agent memory."""

from memmachine_node.node.errors import NodeOperationError
from memmachine_node.node.memory import MemMachineMemory
from memmachine_node.node.operations import MemMachineNode, default_classifier
from memmachine_node.node.parameters import NodeParameters, TraceOptions

__all__ = [
    "MemMachineMemory",
    "MemMachineNode",
    "NodeOperationError",
    "NodeParameters",
    "TraceOptions",
    "default_classifier",
]
