"""Testes para InMemoryContentStore."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from webzine_guard.domain.content import CommentRecord, ContentRow
from webzine_guard.domain.enums import CounterField
from webzine_guard.domain.errors import StoreError
from webzine_guard.infra.content_store_memory import InMemoryContentStore

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _comment(comment_id: str, content_id: str = "post-1", minutes: int = 0, **kwargs):
    created = BASE_TIME + timedelta(minutes=minutes)
    return CommentRecord(
        id=comment_id,
        content_id=content_id,
        user_id=f"guest-{comment_id}",
        user_name="홍길동",
        user_email="홍길동@guest.local",
        body="좋은 글 감사합니다",
        password_hash="$argon2id$fake",
        created_at=created,
        updated_at=created,
        **kwargs,
    )


@pytest.fixture()
def store() -> InMemoryContentStore:
    return InMemoryContentStore([ContentRow(id="post-1", is_published=True, likes_count=2)])


class TestContentRows:
    def test_get_missing_returns_none(self, store):
        assert store.get_content("missing") is None

    def test_update_field_sets_absolute_value(self, store):
        updated = store.update_content_field("post-1", CounterField.LIKES, 10)
        assert updated.likes_count == 10
        assert updated.updated_at is not None
        assert store.get_content("post-1").likes_count == 10

    def test_increment_field(self, store):
        store.increment_content_field("post-1", CounterField.VIEWS)
        assert store.increment_content_field("post-1", CounterField.VIEWS, 2).view_count == 3

    def test_update_missing_content_raises(self, store):
        with pytest.raises(StoreError):
            store.update_content_field("missing", CounterField.LIKES, 1)

    def test_returned_rows_are_copies(self, store):
        row = store.get_content("post-1")
        row.likes_count = 999
        assert store.get_content("post-1").likes_count == 2


class TestComments:
    def test_insert_and_get(self, store):
        store.insert_comment(_comment("c1"))
        assert store.get_comment("c1").body == "좋은 글 감사합니다"

    def test_duplicate_insert_raises(self, store):
        store.insert_comment(_comment("c1"))
        with pytest.raises(StoreError):
            store.insert_comment(_comment("c1"))

    def test_update_missing_comment_raises(self, store):
        with pytest.raises(StoreError):
            store.update_comment("missing", {"is_reported": True})

    def test_list_newest_first_excluding_deleted(self, store):
        store.insert_comment(_comment("old", minutes=0))
        store.insert_comment(_comment("new", minutes=5))
        store.insert_comment(_comment("gone", minutes=10, is_deleted=True))
        store.insert_comment(_comment("other", content_id="post-2", minutes=1))

        records, total = store.list_comments(content_id="post-1")
        assert [r.id for r in records] == ["new", "old"]
        assert total == 2

    def test_list_reported_only_across_contents(self, store):
        store.insert_comment(_comment("a", is_reported=True))
        store.insert_comment(_comment("b", content_id="post-2", minutes=1, is_reported=True))
        store.insert_comment(_comment("c", minutes=2))

        records, total = store.list_comments(reported_only=True, order_by="updated_at")
        assert [r.id for r in records] == ["b", "a"]
        assert total == 2

    def test_list_offset_and_limit(self, store):
        for i in range(5):
            store.insert_comment(_comment(f"c{i}", minutes=i))

        records, total = store.list_comments(content_id="post-1", offset=1, limit=2)
        assert [r.id for r in records] == ["c3", "c2"]
        assert total == 5
