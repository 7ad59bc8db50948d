"""Fuel, ammunition and flight-time estimates for a sortie."""

from __future__ import annotations

from sortie_sim.domain.sortie_models import Sortie
from sortie_sim.domain.types import clamp
from sortie_sim.rules.ruleset import ConsequenceRules, CostRules

DEFAULT_DURATION_MINUTES = 60


def _efficiency_factor(rules: CostRules, efficiency: float) -> float:
    return 1.0 - clamp(efficiency, 0.0, rules.max_efficiency)


def fuel_cost(sortie: Sortie, rules: CostRules, efficiency: float = 0.0) -> int:
    raw = 0
    for assignment in sortie.assignments:
        if assignment.aircraft is None:
            continue
        raw += assignment.aircraft.aircraft_type.fuel_consumption * sortie.target_distance * rules.fuel_per_distance
    return max(int(raw * _efficiency_factor(rules, efficiency)), rules.min_fuel)


def ammo_cost(sortie: Sortie, rules: CostRules, efficiency: float = 0.0) -> int:
    multiplier = rules.ammo_multiplier.get(sortie.mission_type, 1)
    raw = 0
    for assignment in sortie.assignments:
        if assignment.aircraft is None:
            continue
        raw += assignment.aircraft.aircraft_type.ammo * multiplier * rules.ammo_per_unit
    return max(int(raw * _efficiency_factor(rules, efficiency)), rules.min_ammo)


def estimated_duration(sortie: Sortie, rules: ConsequenceRules) -> int:
    """Estimated sortie length in minutes."""
    duration = rules.mission_duration.get(sortie.mission_type)
    if duration is None:
        return DEFAULT_DURATION_MINUTES
    return duration.base + duration.per_distance * sortie.target_distance
