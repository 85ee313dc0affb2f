"""Tests for the operator CLI."""

from sqlalchemy import update

from challenge_admin.lifecycle import LifecycleController
from challenge_admin.models import Challenge
from main import parse_args, run

from conftest import challenge_payload


class TestCli:
    def test_seed_categories(self, session_factory, capsys):
        assert run(parse_args(["seed-categories"]), session_factory) == 0
        assert "SEEDED=7" in capsys.readouterr().out

    def test_reconcile_reports_gap_and_fails(self, session_factory, capsys):
        with session_factory() as db:
            challenge = LifecycleController(db).create_challenge(challenge_payload(), "alice")
            db.execute(update(Challenge).where(Challenge.id == challenge.id).values(state="deployed"))
            db.commit()

        assert run(parse_args(["reconcile"]), session_factory) == 1
        out = capsys.readouterr().out
        assert "unaudited_transition" in out
        assert "CHECKED=1 GAPS=1" in out

        assert run(parse_args(["reconcile", "--repair"]), session_factory) == 0
        assert run(parse_args(["reconcile"]), session_factory) == 0

    def test_init_db_is_idempotent(self, session_factory, capsys):
        assert run(parse_args(["init-db"]), session_factory) == 0
        assert "schema ready" in capsys.readouterr().out
