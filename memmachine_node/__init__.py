"""MemMachine memory node.

Stores and retrieves conversational memory from a MemMachine service and
renders it into a prompt-ready context document for AI agents.
"""

__version__ = "0.3.0"
