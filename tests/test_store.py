"""Tests for the in-memory stores."""

import pytest

from second_brain.models import Category, Chunk, Document, Message, default_settings
from second_brain.store import ConversationLog, DocumentStore, SettingsStore


def _doc(filename: str, category: Category = Category.RESOURCES, n_chunks: int = 1) -> Document:
    chunks = [
        Chunk(
            id=Chunk.make_id(filename, i),
            filename=filename,
            chunk_index=i,
            content=f"{filename} paragraph {i}",
        )
        for i in range(n_chunks)
    ]
    return Document(filename=filename, size_bytes=10, chunks=chunks, category=category)


def test_duplicate_filename_keeps_first_document() -> None:
    changes = []
    store = DocumentStore(on_change=lambda: changes.append(1))

    assert store.add(_doc("notes.md", Category.CAREER, n_chunks=2)) is True
    assert store.add(_doc("notes.md", Category.HEALTH, n_chunks=5)) is False

    assert len(store) == 1
    assert len(store.get("notes.md").chunks) == 2
    assert store.get("notes.md").category is Category.CAREER
    assert changes == [1]


def test_category_override_and_filtering() -> None:
    store = DocumentStore([_doc("a.md", Category.CAREER), _doc("b.md", Category.HEALTH, n_chunks=2)])

    store.set_category("a.md", Category.HEALTH)

    assert [d.filename for d in store.documents(Category.HEALTH)] == ["a.md", "b.md"]
    assert store.documents(Category.CAREER) == []
    assert [c.id for c in store.chunks(Category.HEALTH)] == ["a.md-chunk-0", "b.md-chunk-0", "b.md-chunk-1"]
    counts = store.category_counts()
    assert counts[Category.HEALTH] == 2
    assert sum(counts.values()) == 2
    assert len(counts) == 10


def test_unknown_filename_raises_key_error() -> None:
    store = DocumentStore()

    with pytest.raises(KeyError):
        store.remove("missing.md")
    with pytest.raises(KeyError):
        store.set_category("missing.md", Category.ARCHIVE)


def test_conversation_append_is_one_change() -> None:
    changes = []
    log = ConversationLog(on_change=lambda: changes.append(1))

    log.append(Message(role="user", content="q"), Message(role="assistant", content="a"))

    assert [m.role for m in log.messages] == ["user", "assistant"]
    assert changes == [1]


def test_settings_edits_and_reset() -> None:
    store = SettingsStore()

    store.add_principle("  Rest is productive  ")
    store.set_style(directness_level=3, support_style="Gentle")
    store.set_trait("philosophical", True)

    current = store.current
    assert current.alignment_principles[-1] == "Rest is productive"
    assert current.communication_style.directness_level == 3
    assert current.communication_style.support_style == "Gentle"
    assert current.response_personality["philosophical"] is True

    store.reset()
    assert store.current == default_settings()


@pytest.mark.parametrize(
    "edit",
    [
        lambda s: s.set_style(directness_level=11),
        lambda s: s.set_style(challenge_approach=0),
        lambda s: s.set_style(volume=3),
        lambda s: s.add_principle("   "),
    ],
)
def test_invalid_settings_edits_leave_settings_unchanged(edit) -> None:
    store = SettingsStore()
    before = store.current

    with pytest.raises(ValueError):
        edit(store)

    assert store.current == before


def test_last_principle_cannot_be_removed() -> None:
    store = SettingsStore()
    for _ in range(len(store.current.alignment_principles) - 1):
        store.remove_principle(0)

    with pytest.raises(ValueError):
        store.remove_principle(0)
    assert len(store.current.alignment_principles) == 1
    with pytest.raises(IndexError):
        store.update_principle(5, "nope")
