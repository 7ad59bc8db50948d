"""Sortie resolution pipeline.

Stages run strictly forward: order compliance, readiness (the only abort
point), contact, outcome, consequences, result finalization, pilot
progression, discovery and aircraft turnaround. All randomness is drawn
from the ``rng`` passed in by the caller.
"""

from __future__ import annotations

import logging
import random
from datetime import date

from sortie_sim.domain.events import FactorEvent, FactorLog, FactorScope, MissionLog
from sortie_sim.domain.reports import PilotProgress, SortieReport, TopFactor
from sortie_sim.domain.services import CaptainService, RosterService, SectorMapService
from sortie_sim.domain.sortie_models import Sortie
from sortie_sim.domain.types import SortieStatus
from sortie_sim.domain.world import BaseResources, DailyDirective
from sortie_sim.rules.ruleset import Ruleset
from sortie_sim.systems.consequences import apply_consequences, turnaround_aircraft
from sortie_sim.systems.contact import ContactResult, resolve_contact
from sortie_sim.systems.discovery import resolve_discovery
from sortie_sim.systems.finalizer import finalize_result
from sortie_sim.systems.orders import evaluate_orders
from sortie_sim.systems.outcome import OutcomeResult, determine_outcome
from sortie_sim.systems.progression import apply_progression
from sortie_sim.systems.readiness import check_readiness

logger = logging.getLogger(__name__)

TOP_FACTOR_COUNT = 5


class SortieStateError(RuntimeError):
    pass


def resolve_sortie(
    sortie: Sortie,
    base: BaseResources,
    *,
    rng: random.Random,
    rules: Ruleset | None = None,
    directive: DailyDirective | None = None,
    roster: RosterService | None = None,
    captain: CaptainService | None = None,
    sector_map: SectorMapService | None = None,
    current_date: date | None = None,
) -> SortieReport:
    if sortie.status != SortieStatus.PLANNED:
        raise SortieStateError(f"Sortie already {sortie.status.value}; only planned sorties can be flown")
    rules = rules or Ruleset.default()

    log = MissionLog()
    factors = FactorLog(scope=FactorScope(kind="sortie", id=sortie.mission_type.value))
    sortie.status = SortieStatus.ACTIVE

    compliance = evaluate_orders(sortie.mission_type, directive)
    sortie.followed_orders = compliance.followed
    sortie.order_bonus = compliance.bonus
    sortie.order_message = compliance.message
    if compliance.log_line:
        log.add("orders", compliance.log_line)
    if compliance.bonus:
        factors.add(
            name="orders",
            value=float(compliance.bonus),
            delta=f"{compliance.bonus:+d}",
            why=compliance.message,
            phase="orders",
        )

    readiness = check_readiness(sortie, base, rules.consequences.costs, log, factors)
    if not readiness.ok:
        sortie.status = SortieStatus.ABORTED
        sortie.log = log.entries
        return _report(sortie, log, factors, contact=None, outcome=None, pilots=[], discovered=[])

    contact = resolve_contact(
        sortie.mission_type,
        sortie.target_distance,
        base.operations_rating,
        rng,
        rules.contact,
        log,
        factors,
    )
    outcome = determine_outcome(sortie, base, contact, rng, rules.outcome, log, factors)

    apply_consequences(
        sortie,
        base,
        outcome.band,
        contact.occurred,
        rng,
        rules.consequences,
        log,
        roster=roster,
        captain=captain,
        factors=factors,
    )

    band = finalize_result(sortie, outcome.band, rules.outcome.exchange, log)
    sortie.result_band = band

    saw_action = contact.occurred or sortie.crew_wounded > 0 or sortie.crew_killed > 0
    pilots = apply_progression(
        sortie,
        band,
        saw_action,
        rng,
        rules.progression,
        rules.narratives,
        log,
        roster=roster,
        captain=captain,
        current_date=current_date,
    )

    found = resolve_discovery(sortie, sector_map, rng, rules.progression.discovery, log, current_date)
    turnaround_aircraft(sortie, rules.consequences)

    sortie.status = SortieStatus.RESOLVED
    log.add("complete", f"Mission complete. Result: {band.label}")
    sortie.log = log.entries
    logger.info(
        "Sortie resolved: %s d=%d band=%s kills=%d killed=%d",
        sortie.mission_type.value,
        sortie.target_distance,
        band.label,
        sortie.enemy_kills,
        sortie.crew_killed,
    )
    return _report(
        sortie,
        log,
        factors,
        contact=contact,
        outcome=outcome,
        pilots=pilots,
        discovered=[found.id] if found is not None else [],
    )


def _report(
    sortie: Sortie,
    log: MissionLog,
    factors: FactorLog,
    *,
    contact: ContactResult | None,
    outcome: OutcomeResult | None,
    pilots: list[PilotProgress],
    discovered: list[str],
) -> SortieReport:
    return SortieReport(
        status=sortie.status,
        result_band=sortie.result_band,
        intensity=contact.intensity if contact is not None else None,
        special_event=contact.special_event if contact is not None else None,
        fuel_consumed=sortie.fuel_consumed,
        ammo_consumed=sortie.ammo_consumed,
        aircraft_lost=sortie.aircraft_lost,
        crew_wounded=sortie.crew_wounded,
        crew_killed=sortie.crew_killed,
        enemy_kills=sortie.enemy_kills,
        friendly_score=outcome.friendly_score if outcome is not None else None,
        opposing_score=outcome.opposing_score if outcome is not None else None,
        log=log.entries,
        events=list(factors.events),
        top_factors=_top_factors(factors.events),
        pilots=pilots,
        discovered=discovered,
    )


def _top_factors(events: list[FactorEvent]) -> list[TopFactor]:
    scored: list[tuple[float, FactorEvent]] = []
    for event in events:
        scored.append((abs(event.value), event))
    scored.sort(key=lambda item: item[0], reverse=True)
    return [
        TopFactor(name=event.name, value=event.value, delta=event.delta, why=event.why)
        for _, event in scored[:TOP_FACTOR_COUNT]
    ]
