"""Conversational memory: normalization, categorization and rendering.

Turns raw MemMachine search responses into canonical episodic records and
profile facts, buckets them by recency and renders them into a single
context document for LLM prompts.
"""
