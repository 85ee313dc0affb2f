"""Operator commands for the challenge admin store.

Example:
  - python main.py init-db
  - python main.py seed-categories
  - python main.py reconcile --repair
"""

import argparse
from typing import Optional, Sequence

from sqlalchemy.orm import Session, sessionmaker

from challenge_admin.config import settings
from challenge_admin.crud import seed_categories_if_empty
from challenge_admin.db import SessionLocal, engine
from challenge_admin.lifecycle import reconcile_audit_log
from challenge_admin.logging import configure_logging, get_logger
from challenge_admin.models import Base

logger = get_logger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Challenge admin maintenance commands")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init-db", help="Create all tables on the configured database")
    sub.add_parser("seed-categories", help="Insert the default challenge categories if none exist")
    reconcile = sub.add_parser("reconcile", help="Check that every challenge state is backed by the audit log")
    reconcile.add_argument("--repair", action="store_true", help="Append the missing audit entries")
    return parser.parse_args(argv)


def run(args: argparse.Namespace, session_factory: sessionmaker[Session] = SessionLocal) -> int:
    if args.command == "init-db":
        Base.metadata.create_all(bind=session_factory.kw["bind"])
        print("schema ready")
        return 0

    if args.command == "seed-categories":
        with session_factory() as db:
            seeded = seed_categories_if_empty(db)
        print(f"SEEDED={seeded}")
        return 0

    with session_factory() as db:
        report = reconcile_audit_log(db, repair=args.repair)
    for gap in report.gaps:
        status = "repaired" if gap.repaired else "open"
        print(f"{gap.challenge_id}\t{gap.kind}\tstate={gap.state}\taudited={gap.audited_state}\t{status}")
    print(f"CHECKED={report.checked} GAPS={len(report.gaps)}")
    if report.clean or args.repair:
        return 0
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging(level=settings.effective_log_level, json_format=settings.LOG_JSON)
    args = parse_args(argv)
    logger.info("command_started", command=args.command, database=engine.url.render_as_string(hide_password=True))
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
