"""Pre-launch readiness gate: fuel, ammunition, runway and maintenance."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sortie_sim.domain.events import FactorLog, MissionLog
from sortie_sim.domain.sortie_models import Sortie
from sortie_sim.domain.world import BaseResources
from sortie_sim.rules.ruleset import CostRules
from sortie_sim.systems.costs import ammo_cost, fuel_cost

logger = logging.getLogger(__name__)

PHASE = "readiness"
MAINTENANCE_FLIGHTS_PER_RATING = 2


@dataclass(frozen=True)
class ReadinessResult:
    ok: bool
    fuel_needed: int
    ammo_needed: int
    reason: str | None = None
    maintenance_strained: bool = False


def check_readiness(
    sortie: Sortie,
    base: BaseResources,
    rules: CostRules,
    log: MissionLog,
    factors: FactorLog | None = None,
) -> ReadinessResult:
    """Probe the base for launch preconditions. Never mutates the base or the sortie."""
    log.add(PHASE, "=== PHASE 1: Readiness Check ===")

    fuel_needed = fuel_cost(sortie, rules, base.efficiency_bonus)
    ammo_needed = ammo_cost(sortie, rules, base.efficiency_bonus)

    reason: str | None = None
    if base.fuel < fuel_needed:
        reason = f"ABORT: Insufficient fuel. Need {fuel_needed}, have {base.fuel}."
    elif base.ammo < ammo_needed:
        reason = f"ABORT: Insufficient ammo. Need {ammo_needed}, have {base.ammo}."
    else:
        for assignment in sortie.assignments:
            if assignment.aircraft is None:
                continue
            aircraft_type = assignment.aircraft.aircraft_type
            if aircraft_type.runway_requirement > base.runway_rating:
                reason = (
                    f"ABORT: {aircraft_type.name} requires Runway Level {aircraft_type.runway_requirement}, "
                    f"but base is Level {base.runway_rating}."
                )
                break

    if reason is not None:
        log.add(PHASE, reason)
        logger.warning("Sortie aborted at readiness: %s", reason)
        return ReadinessResult(ok=False, fuel_needed=fuel_needed, ammo_needed=ammo_needed, reason=reason)

    strained = sortie.flight_count > base.maintenance_rating * MAINTENANCE_FLIGHTS_PER_RATING
    if strained:
        log.add(PHASE, "WARNING: Maintenance strained. May affect readiness.")
        logger.warning(
            "Maintenance strained: %d flights against maintenance rating %d",
            sortie.flight_count,
            base.maintenance_rating,
        )
        if factors is not None:
            factors.add(
                name="maintenance_strain",
                value=float(sortie.flight_count),
                delta="warning",
                why=f"Flights exceed {MAINTENANCE_FLIGHTS_PER_RATING}x maintenance rating",
                phase=PHASE,
            )

    log.add(PHASE, "Readiness: GREEN. All checks passed.")
    return ReadinessResult(
        ok=True,
        fuel_needed=fuel_needed,
        ammo_needed=ammo_needed,
        maintenance_strained=strained,
    )
