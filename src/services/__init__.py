"""Ledger and statistics services."""

from services.factory import Services, build_services
from services.ledger import CommittedMatch, Ledger
from services.stats import StatsAggregator

__all__ = ["CommittedMatch", "Ledger", "Services", "StatsAggregator", "build_services"]
