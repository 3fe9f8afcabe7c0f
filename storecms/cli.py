"""
Scheduled publish sweep, meant for cron or a platform scheduler:

    storecms-publish-due
    storecms-publish-due --now 2030-01-01T00:00:00Z
    storecms-publish-due --database-url postgresql://...
"""
from __future__ import annotations

import argparse
import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.orm import sessionmaker

from storecms.core.logging import configure_logging
from storecms.core.settings import Settings, settings
from storecms.db.session import SessionLocal, make_engine
from storecms.db.types import as_utc
from storecms.services.publish_service import publish_due

logger = logging.getLogger("storecms.cli")


def _parse_now(value: str) -> datetime:
    try:
        return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 timestamp: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Publish scheduled pages and posts whose time has come.")
    ap.add_argument("--now", type=_parse_now, default=None, help="Reference time (ISO-8601, default: current UTC)")
    ap.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    ap.add_argument("--log-level", default=settings.LOG_LEVEL)
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.database_url:
        url = Settings(DATABASE_URL=args.database_url).SQLALCHEMY_DATABASE_URL
        session_factory = sessionmaker(bind=make_engine(url), autoflush=False, expire_on_commit=False)
    else:
        session_factory = SessionLocal

    db = session_factory()
    try:
        result = publish_due(db, now=args.now)
    finally:
        db.close()

    print(f"published pages={len(result.page_ids)} posts={len(result.post_ids)}")
    for page_id in result.page_ids:
        print(f"  page {page_id}")
    for post_id in result.post_ids:
        print(f"  post {post_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
