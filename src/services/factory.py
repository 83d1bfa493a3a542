"""Wire a ledger and a stats reader to one database and one set of parameters."""

from __future__ import annotations

from dataclasses import dataclass

from db import create_db_engine, create_session_factory
from domain.ratings.calculator import ScoringParameters
from repositories import ensure_schema
from services.ledger import Ledger
from services.stats import StatsAggregator


@dataclass(frozen=True)
class Services:
    ledger: Ledger
    stats: StatsAggregator


def build_services(db_url: str, params: ScoringParameters) -> Services:
    """Create the schema if needed and share ``params`` between both services."""
    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)
    return Services(
        ledger=Ledger(session_factory, params),
        stats=StatsAggregator(session_factory, params),
    )
