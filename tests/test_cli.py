from datetime import timedelta

from sqlalchemy.orm import sessionmaker

from storecms import cli
from storecms.db.base import Base
from storecms.db.session import make_engine
from storecms.db.types import utcnow
from storecms.models.cms import Page, Post, PostRevision


def test_publish_due_cli(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'sweep.db'}"
    engine = make_engine(url)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)

    soon = utcnow() + timedelta(minutes=10)
    with Session() as s:
        s.add_all([
            Page(title="Launch", slug="launch", status="scheduled", scheduled_at=soon),
            Post(title="Launch Post", slug="launch-post", status="scheduled", scheduled_at=soon),
        ])
        s.commit()

    later = (utcnow() + timedelta(hours=1)).isoformat()
    assert cli.main(["--database-url", url, "--now", later]) == 0
    out = capsys.readouterr().out
    assert "published pages=1 posts=1" in out

    with Session() as s:
        assert s.query(Page).one().status == "published"
        assert s.query(Post).one().status == "published"
        assert s.query(PostRevision).count() == 1
    engine.dispose()


def test_nothing_due(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'empty.db'}"
    engine = make_engine(url)
    Base.metadata.create_all(engine)
    engine.dispose()

    assert cli.main(["--database-url", url]) == 0
    assert "published pages=0 posts=0" in capsys.readouterr().out
