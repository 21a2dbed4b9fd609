from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .llm import CompletionClient
from .models import FALLBACK_CATEGORY, Category

log = logging.getLogger(__name__)


def _category_lines() -> str:
    return "\n".join(f"- {c.value}: {c.description}" for c in Category)


def build_categorize_prompt(filename: str, preview: str) -> str:
    return (
        "Analyze this document and categorize it according to the P.A.R.A. method "
        "+ Wheel of Life areas.\n\n"
        f'Document: "{filename}"\n'
        f'Content preview: "{preview}..."\n\n'
        f"Categories to choose from:\n{_category_lines()}\n\n"
        'Respond with just the category name (e.g., "CAREER" or "LEARNING").'
    )


def parse_category(text: str) -> Optional[Category]:
    return Category.parse(text)


@dataclass(frozen=True)
class CategorizationOutcome:
    """Result of one categorization attempt.

    `ok` is False when the service failed or answered with an unknown label;
    `category` is then the fallback.
    """

    category: Category
    ok: bool
    raw: Optional[str] = None

    @classmethod
    def fallback(cls, raw: Optional[str] = None) -> "CategorizationOutcome":
        return cls(category=FALLBACK_CATEGORY, ok=False, raw=raw)


class Categorizer:
    def __init__(
        self,
        client: CompletionClient,
        model: str,
        max_tokens: int = 100,
        preview_chars: int = 500,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.preview_chars = preview_chars

    async def categorize(self, filename: str, content: str) -> CategorizationOutcome:
        prompt = build_categorize_prompt(filename, content[: self.preview_chars])
        try:
            raw = await self.client.complete(self.model, self.max_tokens, prompt)
        except Exception as exc:
            log.info("Categorization of %s failed, using %s: %s", filename, FALLBACK_CATEGORY.value, exc)
            return CategorizationOutcome.fallback()

        category = parse_category(raw)
        if category is None:
            log.info("Unrecognized category %r for %s, using %s", raw, filename, FALLBACK_CATEGORY.value)
            return CategorizationOutcome.fallback(raw)
        return CategorizationOutcome(category=category, ok=True, raw=raw)


__all__ = ["CategorizationOutcome", "Categorizer", "build_categorize_prompt", "parse_category"]
