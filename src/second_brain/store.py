"""
In-memory state: documents, conversation transcript and coaching settings.

Each store reports mutations through its `on_change` callback; the owner
(see `workspace.Workspace`) decides how to persist them.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .models import Category, Chunk, CoachingSettings, Document, Message, default_settings

log = logging.getLogger(__name__)

OnChange = Optional[Callable[[], None]]


class DocumentStore:
    def __init__(self, documents: Iterable[Document] = (), on_change: OnChange = None) -> None:
        self._documents: Dict[str, Document] = {}
        for doc in documents:
            # first occurrence wins, also for snapshots
            self._documents.setdefault(doc.filename, doc)
        self.on_change = on_change

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, filename: object) -> bool:
        return filename in self._documents

    def get(self, filename: str) -> Document:
        try:
            return self._documents[filename]
        except KeyError:
            raise KeyError(f"No document named {filename!r}") from None

    def documents(self, category: Optional[Category] = None) -> List[Document]:
        docs = list(self._documents.values())
        if category is None:
            return docs
        return [d for d in docs if d.category == category]

    def chunks(self, category: Optional[Category] = None) -> List[Chunk]:
        return [chunk for doc in self.documents(category) for chunk in doc.chunks]

    def category_counts(self) -> Dict[Category, int]:
        counts = {c: 0 for c in Category}
        for doc in self._documents.values():
            counts[doc.category] += 1
        return counts

    def add(self, document: Document) -> bool:
        """Store a document. Returns False (and keeps the old one) if the filename exists."""
        if document.filename in self._documents:
            log.info("Skipping %s: already ingested", document.filename)
            return False
        self._documents[document.filename] = document
        self._changed()
        return True

    def set_category(self, filename: str, category: Category) -> Document:
        doc = self.get(filename)
        doc.category = Category(category)
        self._changed()
        return doc

    def remove(self, filename: str) -> Document:
        doc = self.get(filename)
        del self._documents[filename]
        self._changed()
        return doc

    def clear(self) -> None:
        self._documents.clear()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()


class ConversationLog:
    def __init__(self, messages: Iterable[Message] = (), on_change: OnChange = None) -> None:
        self._messages: List[Message] = list(messages)
        self.on_change = on_change

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def messages(self) -> Sequence[Message]:
        return tuple(self._messages)

    def append(self, *messages: Message) -> None:
        """Append one or more messages as a single step."""
        if not messages:
            return
        self._messages.extend(messages)
        if self.on_change is not None:
            self.on_change()

    def clear(self) -> None:
        self._messages.clear()


class SettingsStore:
    def __init__(self, settings: Optional[CoachingSettings] = None, on_change: OnChange = None) -> None:
        self._settings = settings if settings is not None else default_settings()
        self.on_change = on_change

    @property
    def current(self) -> CoachingSettings:
        return self._settings

    def replace(self, settings: CoachingSettings) -> CoachingSettings:
        self._settings = CoachingSettings.model_validate(settings.model_dump())
        if self.on_change is not None:
            self.on_change()
        return self._settings

    def reset(self) -> CoachingSettings:
        return self.replace(default_settings())

    def add_principle(self, text: str) -> CoachingSettings:
        return self._update(alignment_principles=[*self._settings.alignment_principles, text])

    def update_principle(self, index: int, text: str) -> CoachingSettings:
        principles = list(self._settings.alignment_principles)
        principles[index] = text
        return self._update(alignment_principles=principles)

    def remove_principle(self, index: int) -> CoachingSettings:
        principles = list(self._settings.alignment_principles)
        del principles[index]
        return self._update(alignment_principles=principles)

    def set_style(self, **changes: object) -> CoachingSettings:
        style = self._settings.communication_style.model_dump()
        unknown = set(changes) - set(style)
        if unknown:
            raise ValueError(f"Unknown communication style fields: {', '.join(sorted(unknown))}")
        style.update(changes)
        return self._update(communication_style=style)

    def set_trait(self, name: str, enabled: bool) -> CoachingSettings:
        if not name.strip():
            raise ValueError("trait name must not be blank")
        traits = dict(self._settings.response_personality)
        traits[name.strip()] = bool(enabled)
        return self._update(response_personality=traits)

    def _update(self, **changes: object) -> CoachingSettings:
        data = self._settings.model_dump()
        data.update(changes)
        # pydantic's ValidationError is a ValueError; settings stay untouched on failure
        return self.replace(CoachingSettings.model_validate(data))


__all__ = ["ConversationLog", "DocumentStore", "SettingsStore"]
