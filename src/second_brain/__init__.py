"""
Second Brain.

Personal notes, auto-categorized, answered by a coach that knows your values:
paragraph chunking, keyword retrieval and a personalized prompt over an LLM.
"""

__all__ = [
    "categorize",
    "cli",
    "config",
    "index",
    "ingest",
    "llm",
    "models",
    "persistence",
    "prompting",
    "query",
    "store",
    "workspace",
]
