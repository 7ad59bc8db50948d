"""Post-engagement consequences: resource burn, losses, kills and aircraft turnaround."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from sortie_sim.domain.aircraft import DAMAGED_CONDITION_THRESHOLD
from sortie_sim.domain.crew import CrewMember
from sortie_sim.domain.events import FactorLog, MissionLog
from sortie_sim.domain.services import CaptainService, RosterService
from sortie_sim.domain.sortie_models import FlightAssignment, Sortie
from sortie_sim.domain.types import AircraftStatus, CrewSeat, ResultBand
from sortie_sim.domain.world import BaseResources
from sortie_sim.rules.ruleset import ConsequenceRules
from sortie_sim.systems.costs import ammo_cost, estimated_duration, fuel_cost

logger = logging.getLogger(__name__)

PHASE = "consequences"
MINUTES_PER_HOUR = 60


@dataclass()
class CasualtyTally:
    aircraft_lost: int = 0
    crew_wounded: int = 0
    crew_killed: int = 0
    wounded: list[CrewMember] = field(default_factory=list)
    killed: list[CrewMember] = field(default_factory=list)


def loss_chance(band: ResultBand, rules: ConsequenceRules) -> int:
    return rules.loss_chance.get(band, rules.default_loss_chance)


def burn_resources(sortie: Sortie, base: BaseResources, rules: ConsequenceRules, log: MissionLog) -> tuple[int, int]:
    efficiency = base.efficiency_bonus
    fuel = fuel_cost(sortie, rules.costs, efficiency)
    ammo = ammo_cost(sortie, rules.costs, efficiency)
    base.spend(fuel=fuel, ammo=ammo)
    sortie.fuel_consumed = fuel
    sortie.ammo_consumed = ammo
    log.add(PHASE, f"Consumed: {fuel} fuel, {ammo} ammo (Logistics: {int(efficiency * 100)}%).")
    return fuel, ammo


def _roll_aircraft(
    assignment: FlightAssignment,
    chance: int,
    rng: random.Random,
    rules: ConsequenceRules,
    log: MissionLog,
    tally: CasualtyTally,
) -> None:
    aircraft = assignment.aircraft
    if aircraft is None:
        return
    roll = rng.randrange(100)
    if roll < chance // 3:
        aircraft.status = AircraftStatus.LOST
        tally.aircraft_lost += 1
        log.add(PHASE, f"{aircraft.display_name} was lost.")
    elif roll < chance:
        damage = rng.randint(*rules.damage_range)
        aircraft.apply_damage(damage)
        log.add(PHASE, f"{aircraft.display_name} took {damage}% damage.")
        if aircraft.is_lost:
            tally.aircraft_lost += 1
            log.add(PHASE, f"{aircraft.display_name} was written off.")


def _roll_crew(
    assignment: FlightAssignment,
    seat: CrewSeat,
    crew: CrewMember,
    chance: int,
    rng: random.Random,
    rules: ConsequenceRules,
    log: MissionLog,
    tally: CasualtyTally,
) -> None:
    roll = rng.randrange(100)
    adjusted = chance if seat == CrewSeat.PILOT else int(chance * rules.secondary_crew_factor)
    if roll < adjusted // 4:
        assignment.killed.add(seat)
        tally.crew_killed += 1
        tally.killed.append(crew)
        log.add(PHASE, f"{seat.label} {crew.name} was killed in action.")
    elif roll < adjusted // 2:
        assignment.wounded.add(seat)
        tally.crew_wounded += 1
        tally.wounded.append(crew)
        log.add(PHASE, f"{seat.label} {crew.name} was wounded.")


def apply_losses(
    sortie: Sortie,
    band: ResultBand,
    rng: random.Random,
    rules: ConsequenceRules,
    log: MissionLog,
    roster: RosterService | None = None,
    factors: FactorLog | None = None,
) -> CasualtyTally:
    chance = loss_chance(band, rules)
    tally = CasualtyTally()
    for assignment in sortie.assignments:
        _roll_aircraft(assignment, chance, rng, rules, log, tally)
        for seat, crew in assignment.seats():
            _roll_crew(assignment, seat, crew, chance, rng, rules, log, tally)

    low, high = rules.wound_recovery_days
    for crew in tally.wounded:
        days = rng.randint(low, high)
        if roster is not None:
            roster.wound(crew, days)
    for crew in tally.killed:
        if roster is not None:
            roster.kill(crew)

    sortie.aircraft_lost += tally.aircraft_lost
    sortie.crew_wounded += tally.crew_wounded
    sortie.crew_killed += tally.crew_killed

    if factors is not None:
        factors.add(
            name="loss_chance",
            value=float(chance),
            delta=f"{tally.aircraft_lost} aircraft, {tally.crew_killed} KIA, {tally.crew_wounded} WIA",
            why=f"{band.label} loss table",
            phase=PHASE,
        )
    return tally


def attribute_kills(
    sortie: Sortie,
    band: ResultBand,
    had_contact: bool,
    rng: random.Random,
    rules: ConsequenceRules,
    log: MissionLog,
    captain: CaptainService | None = None,
) -> int:
    if not had_contact or band > ResultBand.MARGINAL_SUCCESS:
        return 0
    kill_range = rules.kill_ranges.get(band)
    if kill_range is None:
        return 0
    kills = rng.randint(*kill_range)
    sortie.enemy_kills = kills
    if kills <= 0:
        return 0

    log.add(PHASE, f"Confirmed enemy kills: {kills}")
    eligible = [
        a for a in sortie.assignments if a.pilot is not None and (a.aircraft is None or not a.aircraft.is_lost)
    ]
    if not eligible:
        return kills

    for _ in range(kills):
        killer = rng.choice(eligible)
        pilot = killer.pilot
        pilot.aerial_victories += 1
        killer.kills_this_sortie += 1
        if killer.aircraft is not None:
            killer.aircraft.kills += 1
        for stat, amount in rules.kill_gains.items():
            pilot.add_improvement(stat, amount)
        log.add(PHASE, f"CONFIRMED KILL: {pilot.name} downed an enemy aircraft!")
        if captain is not None:
            captain.add_merit(rules.captain_merit_per_kill)
    return kills


def apply_consequences(
    sortie: Sortie,
    base: BaseResources,
    band: ResultBand,
    had_contact: bool,
    rng: random.Random,
    rules: ConsequenceRules,
    log: MissionLog,
    *,
    roster: RosterService | None = None,
    captain: CaptainService | None = None,
    factors: FactorLog | None = None,
) -> CasualtyTally:
    log.add(PHASE, "=== PHASE 4: Consequences ===")
    burn_resources(sortie, base, rules, log)
    tally = apply_losses(sortie, band, rng, rules, log, roster, factors)
    attribute_kills(sortie, band, had_contact, rng, rules, log, captain)
    logger.debug(
        "Consequences: fuel=%d ammo=%d lost=%d wounded=%d killed=%d kills=%d",
        sortie.fuel_consumed,
        sortie.ammo_consumed,
        sortie.aircraft_lost,
        sortie.crew_wounded,
        sortie.crew_killed,
        sortie.enemy_kills,
    )
    return tally


def turnaround_aircraft(sortie: Sortie, rules: ConsequenceRules) -> None:
    """Return surviving airframes to the flight line and log their flight time."""
    hours = estimated_duration(sortie, rules) // MINUTES_PER_HOUR
    for assignment in sortie.assignments:
        aircraft = assignment.aircraft
        if aircraft is None or aircraft.is_lost:
            continue
        aircraft.missions_survived += 1
        aircraft.add_flight_time(hours)
        if aircraft.condition < DAMAGED_CONDITION_THRESHOLD:
            aircraft.status = AircraftStatus.DAMAGED
        else:
            aircraft.status = AircraftStatus.READY
