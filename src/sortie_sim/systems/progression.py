"""Per-pilot progression after a resolved sortie.

Each assigned pilot flies through the same sequence: participation gains,
fatigue, mission-type training, survival and order-compliance bonuses,
outcome merit, a rare trait breakout, then the day's pending improvements
are committed and a narrative entry is written to the pilot's history.
"""

from __future__ import annotations

import logging
import random
from datetime import date

from sortie_sim.domain.crew import MAX_NEGATIVE_TRAITS, MAX_POSITIVE_TRAITS, CrewMember, PilotLogEntry, PilotTrait
from sortie_sim.domain.events import MissionLog
from sortie_sim.domain.reports import PilotProgress
from sortie_sim.domain.services import CaptainService, RosterService
from sortie_sim.domain.sortie_models import FlightAssignment, Sortie
from sortie_sim.domain.types import CrewSeat, MissionType, ResultBand
from sortie_sim.rules.ruleset import ProgressionRules, TraitRules

logger = logging.getLogger(__name__)

PHASE = "progression"

NARRATIVE_DISASTER = "disaster"
NARRATIVE_KILL = "kill"
NARRATIVE_CONTACT = "contact"
NARRATIVE_QUIET = "quiet"


def fatigue_gain(sortie: Sortie, rules: ProgressionRules) -> float:
    gain = rules.fatigue.base + rules.fatigue.per_distance * sortie.target_distance
    return gain * rules.fatigue.risk_multiplier.get(sortie.risk, 1.0)


def trait_chance(fatigue: float, band: ResultBand, rules: TraitRules) -> int:
    chance = rules.base_chance
    if fatigue > rules.fatigue_threshold:
        chance += rules.fatigue_bonus
    if band == ResultBand.DISASTER:
        chance += rules.disaster_bonus
    if band == ResultBand.DECISIVE_SUCCESS:
        chance += rules.decisive_bonus
    return chance


def roll_trait_breakout(
    pilot: CrewMember,
    band: ResultBand,
    rng: random.Random,
    rules: TraitRules,
    log: MissionLog,
    roster: RosterService | None = None,
) -> tuple[PilotTrait | None, bool]:
    """Returns the trait gained (if any) and whether the pilot was hospitalized."""
    if rng.randrange(100) >= trait_chance(pilot.fatigue, band, rules):
        return None, False

    if band == ResultBand.DISASTER:
        positive = False
    elif band == ResultBand.DECISIVE_SUCCESS:
        positive = True
    else:
        positive = rng.randrange(100) < 50

    if positive:
        if len(pilot.positive_traits) >= MAX_POSITIVE_TRAITS or not rules.positive:
            return None, False
        trait = rules.positive[rng.randrange(len(rules.positive))]
        if pilot.has_trait(trait.id):
            return None, False
        pilot.positive_traits.append(trait)
        log.add(PHASE, f"BREAKOUT: {pilot.name} has developed a positive trait: {trait.name}!")
        return trait, False

    if len(pilot.negative_traits) >= MAX_NEGATIVE_TRAITS or not rules.negative:
        return None, False
    trait = rules.negative[rng.randrange(len(rules.negative))]
    if pilot.has_trait(trait.id):
        return None, False
    pilot.negative_traits.append(trait)
    log.add(PHASE, f"BREAKOUT: {pilot.name} has developed a negative trait: {trait.name}!")

    if len(pilot.negative_traits) < MAX_NEGATIVE_TRAITS:
        return trait, False
    low, high = rules.hospital_days
    days = rng.randint(low, high)
    if roster is not None:
        roster.hospitalize(pilot, days)
    log.add(PHASE, f"BREAKDOWN: The mental strain was too much. {pilot.name} has been hospitalized.")
    logger.warning("%s hospitalized after breakdown (%d days)", pilot.name, days)
    return trait, True


def narrative_category(assignment: FlightAssignment, band: ResultBand, had_contact: bool) -> str:
    if band == ResultBand.DISASTER:
        return NARRATIVE_DISASTER
    if assignment.kills_this_sortie > 0:
        return NARRATIVE_KILL
    if had_contact:
        return NARRATIVE_CONTACT
    return NARRATIVE_QUIET


def write_narrative(
    assignment: FlightAssignment,
    sortie: Sortie,
    band: ResultBand,
    had_contact: bool,
    narratives: dict[str, tuple[str, ...]],
    rng: random.Random,
    current_date: date | None,
) -> PilotLogEntry:
    templates = narratives[narrative_category(assignment, band, had_contact)]
    entry = PilotLogEntry(
        date=current_date,
        mission_type=sortie.mission_type.label,
        narrative=rng.choice(templates),
        kills=assignment.kills_this_sortie,
        result=band.label,
        was_wounded=CrewSeat.PILOT in assignment.wounded,
        was_shot_down=assignment.aircraft is not None and assignment.aircraft.is_lost,
    )
    assignment.pilot.add_log_entry(entry)
    return entry


def _add_gains(pilot: CrewMember, gains: dict) -> None:
    for stat, amount in gains.items():
        pilot.add_improvement(stat, amount)


def progress_pilot(
    assignment: FlightAssignment,
    sortie: Sortie,
    band: ResultBand,
    had_contact: bool,
    rng: random.Random,
    rules: ProgressionRules,
    narratives: dict[str, tuple[str, ...]],
    log: MissionLog,
    *,
    roster: RosterService | None = None,
    captain: CaptainService | None = None,
    current_date: date | None = None,
) -> PilotProgress:
    pilot = assignment.pilot

    pilot.missions_flown += 1
    _add_gains(pilot, rules.participation)

    fatigue = fatigue_gain(sortie, rules)
    pilot.fatigue = min(rules.fatigue.max, pilot.fatigue + fatigue)
    log.add(PHASE, f"{pilot.name} fatigue increased by {fatigue:.1f}.")

    _add_gains(pilot, rules.mission_bonuses.get(sortie.mission_type, {}))
    if sortie.mission_type == MissionType.STRAFING:
        pilot.ground_targets_destroyed += 1

    if assignment.aircraft is None or not assignment.aircraft.is_lost:
        _add_gains(pilot, rules.survival_bonus)

    merit = 0
    if sortie.followed_orders and sortie.order_bonus > 0:
        _add_gains(pilot, rules.orders.gains)
        merit += rules.orders.merit
        if captain is not None:
            captain.add_merit(rules.orders.captain_merit)

    merit += rules.outcome_merit.get(band, 0)
    pilot.merit += merit
    if merit > 0:
        log.add(PHASE, f"{pilot.name} earned {merit} Merit for mission performance.")

    trait, hospitalized = roll_trait_breakout(pilot, band, rng, rules.traits, log, roster)

    pending = dict(pilot.daily_improvements)
    applied = pilot.apply_daily_improvements()

    write_narrative(assignment, sortie, band, had_contact, narratives, rng, current_date)

    return PilotProgress(
        crew_id=pilot.id,
        name=pilot.name,
        fatigue_gain=fatigue,
        merit_gain=merit,
        pending_gains=pending,
        applied_gains=applied,
        new_trait=trait.name if trait is not None else None,
        hospitalized=hospitalized,
    )


def apply_progression(
    sortie: Sortie,
    band: ResultBand,
    had_contact: bool,
    rng: random.Random,
    rules: ProgressionRules,
    narratives: dict[str, tuple[str, ...]],
    log: MissionLog,
    *,
    roster: RosterService | None = None,
    captain: CaptainService | None = None,
    current_date: date | None = None,
) -> list[PilotProgress]:
    progress: list[PilotProgress] = []
    for assignment in sortie.assignments:
        if assignment.pilot is None:
            continue
        progress.append(
            progress_pilot(
                assignment,
                sortie,
                band,
                had_contact,
                rng,
                rules,
                narratives,
                log,
                roster=roster,
                captain=captain,
                current_date=current_date,
            )
        )
    return progress
