"""Async entry point that feeds store data through the validation stages."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from consigliere.config import CapThresholds, get_thresholds
from consigliere.models import TradeProposal
from consigliere.roster import DEFAULT_TIMEOUT, RosterSource, fetch_rosters

from .conservation import check_conservation
from .stages import (
    ValidationResult,
    aggregate_results,
    analyze_salaries,
    enforce_cba_rules,
    validate_roster_sizes,
)


logger = logging.getLogger("uvicorn.error")


class TradeValidator:
    """Stateless validator bound to a store; safe to share across requests."""

    def __init__(
        self,
        store: RosterSource,
        *,
        thresholds: CapThresholds | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
    ):
        self.store = store
        self.thresholds = thresholds or get_thresholds()
        self.timeout = timeout

    async def validate(self, proposal: TradeProposal) -> ValidationResult:
        """Return a verdict for ``proposal``.

        Raises ``MalformedProposal`` for an inconsistent partition and
        ``ServiceUnavailable`` when rosters cannot be loaded; no partial
        result is produced in either case.
        """

        started = time.perf_counter()
        check_conservation(proposal)

        rosters = await fetch_rosters(self.store, proposal.teams, timeout=self.timeout)
        analysis = analyze_salaries(proposal, rosters, self.thresholds)
        roster_validation = validate_roster_sizes(proposal, rosters, self.thresholds)
        rule_validation = enforce_cba_rules(analysis, self.thresholds)

        result = aggregate_results(
            analysis,
            roster_validation,
            rule_validation,
            timestamp=datetime.now(timezone.utc),
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )
        logger.info(
            "Validated trade between %s: valid=%s violations=%d (%.1f ms)",
            ", ".join(proposal.teams),
            result.is_valid,
            len(result.violations),
            result.processing_time_ms,
        )
        return result


async def validate_trade(
    proposal: TradeProposal,
    store: RosterSource,
    *,
    thresholds: CapThresholds | None = None,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> ValidationResult:
    return await TradeValidator(store, thresholds=thresholds, timeout=timeout).validate(proposal)
