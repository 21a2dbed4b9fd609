from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional
from pathlib import Path

from pydantic import TypeAdapter

from .categorize import Categorizer
from .config import AppConfig
from .ingest import build_document, is_supported_file, iter_files, read_document
from .llm import CompletionClient
from .models import Category, Chunk, CoachingSettings, Document, Message, default_settings
from .persistence import DOCUMENTS_KEY, MESSAGES_KEY, SETTINGS_KEY, JsonStateStore
from .query import Assistant
from .store import ConversationLog, DocumentStore, SettingsStore

log = logging.getLogger(__name__)

_documents_adapter = TypeAdapter(List[Document])
_messages_adapter = TypeAdapter(List[Message])
_settings_adapter = TypeAdapter(CoachingSettings)


class Workspace:
    """
    Owns the document store, the conversation log and the settings store.

    State is loaded from JSON snapshots on construction and written back
    whenever a store reports a change. Empty document/message collections are
    never written; emptying them deletes the snapshot instead.
    """

    def __init__(self, cfg: AppConfig, client: CompletionClient) -> None:
        self.cfg = cfg
        self.state = JsonStateStore(cfg.state_dir_resolved)
        self.selected_category: Optional[Category] = None

        self.documents = DocumentStore(
            self.state.load(DOCUMENTS_KEY, _documents_adapter) or [],
            on_change=self._save_documents,
        )
        self.conversation = ConversationLog(
            self.state.load(MESSAGES_KEY, _messages_adapter) or [],
            on_change=self._save_messages,
        )
        self.settings = SettingsStore(
            self.state.load(SETTINGS_KEY, _settings_adapter) or default_settings(),
            on_change=self._save_settings,
        )
        self._save_settings()

        self.categorizer = Categorizer(
            client,
            model=cfg.openai_model,
            max_tokens=cfg.categorize_max_tokens,
            preview_chars=cfg.preview_chars,
        )
        self.assistant = Assistant(
            client,
            self.conversation,
            self.settings,
            model=cfg.openai_model,
            max_tokens=cfg.answer_max_tokens,
            top_k=cfg.top_k,
        )

    # -------- persistence ----------
    # a failed write is logged; in-memory state stays authoritative
    def _save_documents(self) -> None:
        try:
            if len(self.documents):
                self.state.save(DOCUMENTS_KEY, self.documents.documents(), _documents_adapter)
            else:
                self.state.delete(DOCUMENTS_KEY)
        except OSError as e:
            log.error("Could not write %s snapshot: %s", DOCUMENTS_KEY, e)

    def _save_messages(self) -> None:
        if not len(self.conversation):
            return
        try:
            self.state.save(MESSAGES_KEY, list(self.conversation.messages), _messages_adapter)
        except OSError as e:
            log.error("Could not write %s snapshot: %s", MESSAGES_KEY, e)

    def _save_settings(self) -> None:
        try:
            self.state.save(SETTINGS_KEY, self.settings.current, _settings_adapter)
        except OSError as e:
            log.error("Could not write %s snapshot: %s", SETTINGS_KEY, e)

    # -------- documents ----------
    async def upload(self, paths: Iterable[Path]) -> List[Document]:
        """Ingest files one after another; returns the newly stored documents."""
        added: List[Document] = []
        for path in iter_files(paths):
            if not is_supported_file(path):
                log.debug("Skipping unsupported file %s", path)
                continue
            if path.name in self.documents:
                log.info("Skipping %s: already ingested", path.name)
                continue
            try:
                text, size = read_document(path)
            except OSError as e:
                log.warning("Could not read %s: %s", path, e)
                continue
            doc = await self.ingest_text(path.name, text, size)
            if doc is not None:
                added.append(doc)
        return added

    async def ingest_text(
        self, filename: str, text: str, size_bytes: Optional[int] = None
    ) -> Optional[Document]:
        if filename in self.documents:
            return None
        if size_bytes is None:
            size_bytes = len(text.encode("utf-8"))
        doc = await build_document(
            filename, text, size_bytes, self.categorizer, min_chars=self.cfg.min_chunk_chars
        )
        return doc if self.documents.add(doc) else None

    def set_category(self, filename: str, category: Category) -> Document:
        return self.documents.set_category(filename, category)

    def remove_document(self, filename: str) -> Document:
        return self.documents.remove(filename)

    def category_counts(self) -> Dict[Category, int]:
        return self.documents.category_counts()

    def candidate_chunks(self) -> List[Chunk]:
        return self.documents.chunks(self.selected_category)

    # -------- conversation ----------
    async def ask(self, question: str) -> Message:
        return await self.assistant.ask(question, self.candidate_chunks())

    def clear_all(self) -> None:
        """Forget every document and message. Settings are kept."""
        self.state.delete(DOCUMENTS_KEY)
        self.state.delete(MESSAGES_KEY)
        self.documents.clear()
        self.conversation.clear()
        log.info("Cleared all documents and messages")


__all__ = ["Workspace"]
