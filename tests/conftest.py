"""Shared fixtures: a throwaway SQLite database per test."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from db import create_db_engine, create_session_factory
from repositories import ensure_schema
from services import Ledger, StatsAggregator


class FakeClock:
    """Deterministic clock that advances one minute per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(minutes=1)
        return value


@pytest.fixture
def engine(tmp_path: Path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger(session_factory, clock: FakeClock) -> Ledger:
    return Ledger(session_factory, clock=clock)


@pytest.fixture
def stats(session_factory, clock: FakeClock) -> StatsAggregator:
    return StatsAggregator(session_factory, clock=clock)


@pytest.fixture
def roster(ledger: Ledger) -> dict[str, int]:
    """Six players at the initial rating, keyed by name."""
    names = ["Alice", "Bruno", "Chloe", "Dylan", "Emile", "Fanny"]
    return {name: ledger.add_player(name).id for name in names}
