"""Built-in context templates."""

DEFAULT_CONTEXT_TEMPLATE = """# Memory Context

**Instructions**: Use semantic memory as ground truth about the user. Enrich your understanding with short-term memory for recent context and long-term memory for historical patterns.

## User Profile (Semantic Memory)
{{semanticMemory}}

## Recent Context (Short-Term Memory)
{{shortTermMemory}}

{{episodeSummary}}

## Historical Context (Long-Term Memory)
{{longTermMemory}}"""
