from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Tuple

from .categorize import Categorizer
from .models import Chunk, Document

log = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".txt", ".md"}
MIN_CHUNK_CHARS = 50

PARAGRAPH_BREAK = "\n\n"


def chunk_text(text: str, filename: str, min_chars: int = MIN_CHUNK_CHARS) -> List[Chunk]:
    """Split text into paragraph chunks, dropping fragments of `min_chars` or fewer."""
    cleaned = text.replace("\r\n", "\n")
    chunks: List[Chunk] = []
    for fragment in cleaned.split(PARAGRAPH_BREAK):
        fragment = fragment.strip()
        if len(fragment) <= min_chars:
            continue
        index = len(chunks)
        chunks.append(
            Chunk(
                id=Chunk.make_id(filename, index),
                filename=filename,
                chunk_index=index,
                content=fragment,
            )
        )
    return chunks


def is_supported_file(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_SUFFIXES


def iter_files(paths: Iterable[Path]) -> Iterable[Path]:
    for path in paths:
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file():
                    yield child
        else:
            yield path


def read_document(path: Path) -> Tuple[str, int]:
    """Return (text, size in bytes) for a text file."""
    data = path.read_bytes()
    return data.decode("utf-8", errors="replace"), len(data)


async def build_document(
    filename: str,
    text: str,
    size_bytes: int,
    categorizer: Categorizer,
    min_chars: int = MIN_CHUNK_CHARS,
) -> Document:
    chunks = chunk_text(text, filename, min_chars=min_chars)
    outcome = await categorizer.categorize(filename, text)
    log.info(
        "Ingested %s: %d chunks, category %s%s",
        filename,
        len(chunks),
        outcome.category.value,
        "" if outcome.ok else " (fallback)",
    )
    return Document(
        filename=filename,
        size_bytes=size_bytes,
        chunks=chunks,
        category=outcome.category,
    )


__all__ = [
    "MIN_CHUNK_CHARS",
    "SUPPORTED_SUFFIXES",
    "build_document",
    "chunk_text",
    "is_supported_file",
    "iter_files",
    "read_document",
]
