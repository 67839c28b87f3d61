"""Tests for the repository port's entity and id guards."""

from __future__ import annotations

import pytest

from stowr.domain.aggregate import Entity
from stowr.domain.ids import RepositoryId, Tag
from stowr.domain.repository import Repository


class NoteTag(Tag):
    pass


class NoteId(RepositoryId[NoteTag]):
    __slots__ = ()
    tag = NoteTag


class PageTag(Tag):
    pass


class PageId(RepositoryId[PageTag]):
    __slots__ = ()
    tag = PageTag


class Note(Entity):
    id: NoteId
    text: str


class NoteRepository(Repository[Note, NoteId]):
    entity_type = Note
    id_type = NoteId


class _DictNoteRepository(NoteRepository):
    def __init__(self) -> None:
        self._items: dict[NoteId, Note] = {}

    async def create(self, entity: Note) -> Note:
        self.check_entity(entity)
        self._items[entity.id] = entity
        return entity

    async def fetch(self, id: NoteId) -> Note | None:
        self.check_id(id)
        return self._items.get(id)


class TestRepositoryPort:
    def test_port_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            NoteRepository()  # type: ignore[abstract]

    def test_binding(self) -> None:
        assert NoteRepository.entity_type is Note
        assert NoteRepository.id_type is NoteId

    def test_unbound_port(self) -> None:
        assert Repository.entity_type is None
        assert Repository.id_type is None


class TestGuards:
    def test_check_id_accepts_own_id(self) -> None:
        _DictNoteRepository().check_id(NoteId.new())

    def test_check_id_rejects_other_entity(self) -> None:
        with pytest.raises(TypeError, match="keyed by NoteId, got PageId"):
            _DictNoteRepository().check_id(PageId.new())

    def test_check_entity_rejects_other_type(self) -> None:
        with pytest.raises(TypeError, match="stores Note"):
            _DictNoteRepository().check_entity(object())


class TestAdapter:
    async def test_create_then_fetch(self) -> None:
        repo = _DictNoteRepository()
        note = Note(id=NoteId.new(), text="hello")
        assert await repo.create(note) == note
        assert await repo.fetch(note.id) == note

    async def test_fetch_absent_is_none(self) -> None:
        assert await _DictNoteRepository().fetch(NoteId.new()) is None
