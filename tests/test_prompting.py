"""Tests for the personalized prompt assembler."""

import pytest

from second_brain.models import Chunk, CoachingSettings, CommunicationStyle, default_settings
from second_brain.prompting import (
    CHUNK_DELIMITER,
    KNOWLEDGE_HEADER,
    build_prompt,
    challenge_band,
    directness_band,
    humanize_trait,
)


def _settings(directness: int = 8, challenge: int = 3, traits=None) -> CoachingSettings:
    return CoachingSettings(
        alignment_principles=["Family first", "Stay curious"],
        communication_style=CommunicationStyle(
            directness_level=directness,
            challenge_approach=challenge,
            support_style="Warm",
            feedback_method="Socratic questions",
        ),
        response_personality=traits if traits is not None else {"emotionallyAware": True, "humorous": False},
    )


def _chunk(filename: str, index: int, content: str) -> Chunk:
    return Chunk(id=Chunk.make_id(filename, index), filename=filename, chunk_index=index, content=content)


@pytest.mark.parametrize(
    "level, band",
    [
        (10, "very direct"),
        (8, "very direct"),
        (7, "moderately direct"),
        (5, "moderately direct"),
        (4, "gentle and supportive"),
        (1, "gentle and supportive"),
    ],
)
def test_directness_bands(level: int, band: str) -> None:
    assert directness_band(level) == band


@pytest.mark.parametrize(
    "level, band",
    [
        (8, "strongly challenge"),
        (7, "gently question"),
        (5, "gently question"),
        (4, "supportive rather than challenging"),
    ],
)
def test_challenge_bands(level: int, band: str) -> None:
    assert challenge_band(level) == band


@pytest.mark.parametrize(
    "name, expected",
    [
        ("emotionallyAware", "Emotionally Aware"),
        ("humorous", "Humorous"),
        ("growthFocused", "Growth Focused"),
        ("practicalSolutions", "Practical Solutions"),
    ],
)
def test_humanize_trait(name: str, expected: str) -> None:
    assert humanize_trait(name) == expected


def test_sections_appear_in_fixed_order() -> None:
    chunks = [_chunk("a.md", 0, "Alpha content")]

    prompt = build_prompt("How do I grow?", chunks, _settings())

    order = [
        "personalized life coach",
        "ALIGNMENT PRINCIPLES:",
        "COMMUNICATION STYLE:",
        "RESPONSE PERSONALITY:",
        KNOWLEDGE_HEADER,
        'QUESTION: "How do I grow?"',
        "Answer honestly",
    ]
    positions = [prompt.index(marker) for marker in order]
    assert positions == sorted(positions)


def test_principles_numbered_in_order() -> None:
    prompt = build_prompt("q", [], _settings())

    assert "ALIGNMENT PRINCIPLES:\n1. Family first\n2. Stay curious" in prompt


def test_style_renders_bands_with_raw_values() -> None:
    prompt = build_prompt("q", [], _settings(directness=8, challenge=3))

    assert "Directness: 8/10 (be very direct)" in prompt
    assert "Challenge: 3/10 (supportive rather than challenging the user's assumptions)" in prompt
    assert "Support style: Warm" in prompt
    assert "Feedback method: Socratic questions" in prompt


def test_only_enabled_traits_are_listed() -> None:
    prompt = build_prompt("q", [], _settings())

    assert "- Emotionally Aware" in prompt
    assert "Humorous" not in prompt


def test_personality_section_omitted_without_enabled_traits() -> None:
    prompt = build_prompt("q", [], _settings(traits={"humorous": False}))

    assert "RESPONSE PERSONALITY:" not in prompt


def test_knowledge_block_omitted_without_chunks() -> None:
    prompt = build_prompt("q", [], default_settings())

    assert KNOWLEDGE_HEADER not in prompt
    assert "Document \"" not in prompt


def test_one_labeled_section_per_chunk() -> None:
    chunks = [_chunk("a.md", 4, "Alpha"), _chunk("b.md", 0, "Beta"), _chunk("a.md", 1, "Gamma")]

    prompt = build_prompt("q", chunks, default_settings())

    assert prompt.count("(Section ") == 3
    expected = CHUNK_DELIMITER.join(
        [
            'Document "a.md" (Section 1): Alpha',
            'Document "b.md" (Section 2): Beta',
            'Document "a.md" (Section 3): Gamma',
        ]
    )
    assert expected in prompt


def test_prompt_is_deterministic() -> None:
    chunks = [_chunk("a.md", 0, "Alpha")]
    settings = _settings()

    assert build_prompt("q", chunks, settings) == build_prompt("q", chunks, settings)
