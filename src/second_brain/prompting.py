from __future__ import annotations

import re
from typing import List, Sequence

from .models import Chunk, CoachingSettings

PREAMBLE = (
    "You are a personalized life coach and thinking partner. You know the user's "
    "values, their documents and how they want to be spoken to, and you tailor "
    "every answer to them."
)

CHUNK_DELIMITER = "\n\n---\n\n"
KNOWLEDGE_HEADER = "RELEVANT KNOWLEDGE FROM YOUR DOCUMENTS:"

CLOSING = (
    "Answer honestly and in line with the alignment principles, communication "
    "style and personality described above. If the documents do not cover the "
    "question, say so and draw on general knowledge."
)


def directness_band(level: int) -> str:
    if level > 7:
        return "very direct"
    if level > 4:
        return "moderately direct"
    return "gentle and supportive"


def challenge_band(level: int) -> str:
    if level > 7:
        return "strongly challenge"
    if level > 4:
        return "gently question"
    return "supportive rather than challenging"


def humanize_trait(name: str) -> str:
    """`emotionallyAware` -> `Emotionally Aware`."""
    words = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", name).split()
    return " ".join(w[:1].upper() + w[1:] for w in words)


def _principles_section(settings: CoachingSettings) -> str:
    lines = [f"{i}. {p}" for i, p in enumerate(settings.alignment_principles, start=1)]
    return "ALIGNMENT PRINCIPLES:\n" + "\n".join(lines)


def _style_section(settings: CoachingSettings) -> str:
    style = settings.communication_style
    return "\n".join(
        [
            "COMMUNICATION STYLE:",
            f"- Directness: {style.directness_level}/10 (be {directness_band(style.directness_level)})",
            f"- Challenge: {style.challenge_approach}/10 "
            f"({challenge_band(style.challenge_approach)} the user's assumptions)",
            f"- Support style: {style.support_style}",
            f"- Feedback method: {style.feedback_method}",
        ]
    )


def _personality_section(settings: CoachingSettings) -> str:
    traits = [humanize_trait(name) for name, on in settings.response_personality.items() if on]
    if not traits:
        return ""
    return "RESPONSE PERSONALITY:\n" + "\n".join(f"- {t}" for t in traits)


def _knowledge_section(chunks: Sequence[Chunk]) -> str:
    if not chunks:
        return ""
    sections = [
        f'Document "{chunk.filename}" (Section {i}): {chunk.content}'
        for i, chunk in enumerate(chunks, start=1)
    ]
    return f"{KNOWLEDGE_HEADER}\n\n" + CHUNK_DELIMITER.join(sections)


def build_prompt(question: str, chunks: Sequence[Chunk], settings: CoachingSettings) -> str:
    parts: List[str] = [
        PREAMBLE,
        _principles_section(settings),
        _style_section(settings),
        _personality_section(settings),
        _knowledge_section(chunks),
        f'QUESTION: "{question}"',
        CLOSING,
    ]
    return "\n\n".join(p for p in parts if p)


__all__ = [
    "CHUNK_DELIMITER",
    "KNOWLEDGE_HEADER",
    "build_prompt",
    "challenge_band",
    "directness_band",
    "humanize_trait",
]
