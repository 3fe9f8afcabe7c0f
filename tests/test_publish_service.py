from datetime import timedelta

import pytest

from storecms.core.errors import ValidationError
from storecms.db.types import utcnow
from storecms.models.cms import Page, Post, PostRevision
from storecms.services import publish_service
from storecms.services.publish_service import (
    assert_status_invariants, is_publicly_visible, publish_due,
)


def _post(db, slug="p", **kw) -> Post:
    post = Post(title=slug.title(), slug=slug, **kw)
    db.add(post)
    db.commit()
    return post


def _page(db, slug="pg", **kw) -> Page:
    page = Page(title=slug.title(), slug=slug, **kw)
    db.add(page)
    db.commit()
    return page


# ---- Invariants ----
def test_published_requires_published_at():
    with pytest.raises(ValidationError) as exc:
        assert_status_invariants("published", None, None)
    assert exc.value.message == "Published posts require a publishedAt date"
    assert exc.value.details[0]["field"] == "publishedAt"


def test_scheduled_requires_scheduled_at():
    with pytest.raises(ValidationError) as exc:
        assert_status_invariants("scheduled", None, None)
    assert exc.value.message == "Scheduled posts require a scheduledAt date"


@pytest.mark.parametrize("status", ["draft", "archived"])
def test_other_states_need_nothing(status):
    assert_status_invariants(status, None, None)


# ---- Visibility ----
def test_visible_only_when_published_and_due():
    now = utcnow()
    assert is_publicly_visible("published", now - timedelta(seconds=1), now)
    assert is_publicly_visible("published", now, now)
    assert not is_publicly_visible("published", now + timedelta(hours=1), now)
    assert not is_publicly_visible("published", None, now)
    for status in ("draft", "scheduled", "archived"):
        assert not is_publicly_visible(status, now - timedelta(days=1), now)


def test_visibility_accepts_naive_utc():
    now = utcnow()
    naive_past = (now - timedelta(minutes=5)).replace(tzinfo=None)
    assert is_publicly_visible("published", naive_past, now)


# ---- Transitions ----
def test_publish_keeps_existing_published_at(db):
    first = utcnow() - timedelta(days=3)
    post = _post(db, status="draft", published_at=first)
    publish_service.apply_publish(post)
    assert post.status == "published"
    assert post.published_at == first


def test_publish_sets_published_at_and_clears_schedule(db):
    post = _post(db, status="scheduled", scheduled_at=utcnow() + timedelta(days=1))
    now = utcnow()
    publish_service.apply_publish(post, now)
    assert post.published_at == now
    assert post.scheduled_at is None


def test_schedule_must_be_in_the_future(db):
    post = _post(db)
    with pytest.raises(ValidationError) as exc:
        publish_service.apply_schedule(post, utcnow() - timedelta(minutes=1))
    assert exc.value.message == "scheduledAt must be in the future"
    assert post.status == "draft"


def test_schedule_sets_status_and_time(db):
    post = _post(db)
    when = utcnow() + timedelta(hours=2)
    publish_service.apply_schedule(post, when)
    assert post.status == "scheduled"
    assert post.scheduled_at == when


def test_unpublish_returns_to_draft(db):
    page = _page(db, status="scheduled", scheduled_at=utcnow() + timedelta(days=1))
    publish_service.apply_unpublish(page, clear_schedule=True)
    assert page.status == "draft"
    assert page.scheduled_at is None


# ---- Sweep ----
def test_publish_due_promotes_only_due_rows(db):
    now = utcnow()
    due_page = _page(db, "due-page", status="scheduled", scheduled_at=now + timedelta(minutes=5))
    later_page = _page(db, "later-page", status="scheduled", scheduled_at=now + timedelta(days=5))
    due_post = _post(db, "due-post", status="scheduled", scheduled_at=now + timedelta(minutes=10))
    draft_post = _post(db, "draft-post")

    result = publish_due(db, now=now + timedelta(hours=1))

    assert result.page_ids == [due_page.id]
    assert result.post_ids == [due_post.id]

    db.expire_all()
    assert db.get(Page, due_page.id).status == "published"
    assert db.get(Page, due_page.id).scheduled_at is None
    assert db.get(Page, later_page.id).status == "scheduled"
    assert db.get(Post, due_post.id).status == "published"
    assert db.get(Post, draft_post.id).status == "draft"


def test_publish_due_snapshots_posts(db):
    now = utcnow()
    post = _post(db, "swept", status="scheduled", scheduled_at=now + timedelta(minutes=1))
    publish_due(db, now=now + timedelta(minutes=2))
    revs = db.query(PostRevision).filter_by(post_id=post.id).all()
    assert len(revs) == 1
    assert revs[0].snapshot_json["status"] == "scheduled"
    assert revs[0].created_by_user_id is None


def test_publish_due_is_idempotent(db):
    now = utcnow()
    _post(db, "once", status="scheduled", scheduled_at=now + timedelta(minutes=1))
    first = publish_due(db, now=now + timedelta(minutes=5))
    second = publish_due(db, now=now + timedelta(minutes=5))
    assert first.total == 1
    assert second.total == 0
    assert db.query(PostRevision).count() == 1


def test_swept_post_becomes_publicly_visible(db):
    now = utcnow()
    post = _post(db, "gate", status="scheduled", scheduled_at=now + timedelta(minutes=1))
    later = now + timedelta(minutes=2)
    publish_due(db, now=later)
    db.refresh(post)
    assert is_publicly_visible(post.status, post.published_at, later)


def test_schedule_one_second_boundary():
    now = utcnow()
    post = Post(title="Edge", slug="edge", status="draft")

    for target in (now - timedelta(seconds=1), now):
        with pytest.raises(ValidationError):
            publish_service.apply_schedule(post, target, now)
    assert post.status == "draft"
    assert post.scheduled_at is None

    publish_service.apply_schedule(post, now + timedelta(seconds=1), now)
    assert post.status == "scheduled"
    assert post.scheduled_at == now + timedelta(seconds=1)
