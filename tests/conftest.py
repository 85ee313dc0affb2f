"""Shared pytest fixtures for the challenge lifecycle tests.

Each test gets its own file-backed SQLite database so that several sessions
can read and write the same rows, which the concurrency tests rely on.
"""

from collections.abc import Generator
from typing import Any

import pytest
import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from challenge_admin.db import build_engine
from challenge_admin.lifecycle import LifecycleController
from challenge_admin.logging import configure_logging
from challenge_admin.models import Base


def challenge_payload(**overrides: Any) -> dict[str, Any]:
    """A tiered challenge that passes every automated check."""
    payload: dict[str, Any] = {
        "code": "hero_level_total",
        "name": "Total Hero Levels",
        "category": "hero_progression",
        "type": "tiered",
        "description_short": "Sum of levels across all heroes.",
        "metric_type": "integer",
        "metric_source": "onchain_heroes",
        "metric_key": "total_levels",
        "metric_aggregation": "sum",
        "metric_filters": {"realm": "crystalvale"},
        "tiering_mode": "threshold",
        "tier_config": {"unit": "levels"},
        "tiers": [
            {"tier_code": "COMMON", "display_name": "Common", "threshold_value": 10, "sort_order": 1},
            {"tier_code": "RARE", "display_name": "Rare", "threshold_value": 50, "sort_order": 2},
            {"tier_code": "MYTHIC", "display_name": "Mythic", "threshold_value": 200, "is_prestige": True, "sort_order": 3},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True, scope="session")
def _test_logging() -> None:
    configure_logging(level="WARNING", json_format=True, service_name="challenge-admin-tests")
    # Resolve loggers per call so output follows whatever stdout pytest has swapped in.
    structlog.configure(cache_logger_on_first_use=False)


@pytest.fixture
def engine(tmp_path) -> Generator[Engine, None, None]:
    engine = build_engine(f"sqlite:///{tmp_path / 'challenges.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session


@pytest.fixture
def controller(db: Session) -> LifecycleController:
    return LifecycleController(db)


@pytest.fixture
def draft(controller: LifecycleController):
    return controller.create_challenge(challenge_payload(), actor="alice")


def promote_to(controller: LifecycleController, challenge_id: int, target: str, actor: str = "alice") -> int:
    """Walk a passing challenge forward to ``target`` and return its version."""
    path = {"validated": ["validated"], "deployed": ["validated", "deployed"],
            "deprecated": ["validated", "deployed", "deprecated"]}[target]
    version = controller.get_challenge(challenge_id).version
    for state in path:
        if state == "deployed":
            controller.run_validation(
                challenge_id, {"etl_output_verified": True, "copy_approved": True}, actor
            )
        version = controller.request_transition(challenge_id, state, actor, version).version
    return version
