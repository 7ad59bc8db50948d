"""Friendly and opposing combat-strength scores."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable

from sortie_sim.domain.aircraft import AircraftType
from sortie_sim.domain.events import FactorLog, MissionLog
from sortie_sim.domain.sortie_models import FlightAssignment, Sortie
from sortie_sim.domain.types import ContactIntensity, MissionType, Skill, SpecialEvent
from sortie_sim.domain.world import BaseResources
from sortie_sim.rules.ruleset import EffectivenessRules, OppositionRules

PHASE = "outcome"


@dataclass(frozen=True)
class MissionProfile:
    """How one mission type turns an airframe and its crew into combat strength."""

    aircraft: Callable[[AircraftType], float]
    crew: Callable[[FlightAssignment], float]
    crew_divisor: float


def _escort_aircraft(aircraft_type: AircraftType) -> float:
    return (aircraft_type.fighter_effectiveness() + aircraft_type.durability_score()) / 2


def _escort_crew(assignment: FlightAssignment) -> float:
    return assignment.combined_dogfight_rating() + assignment.defensive_rating()


FIGHTER_PROFILE = MissionProfile(
    aircraft=AircraftType.fighter_effectiveness,
    crew=FlightAssignment.combined_dogfight_rating,
    crew_divisor=10.0,
)

MISSION_PROFILES: dict[MissionType, MissionProfile] = {
    MissionType.PATROL: FIGHTER_PROFILE,
    MissionType.INTERCEPTION: FIGHTER_PROFILE,
    MissionType.BOMBING: MissionProfile(
        aircraft=AircraftType.bomber_effectiveness,
        crew=FlightAssignment.bombing_rating,
        crew_divisor=10.0,
    ),
    MissionType.RECONNAISSANCE: MissionProfile(
        aircraft=AircraftType.recon_effectiveness,
        crew=FlightAssignment.combined_recon_rating,
        crew_divisor=10.0,
    ),
    MissionType.ESCORT: MissionProfile(aircraft=_escort_aircraft, crew=_escort_crew, crew_divisor=20.0),
}

SKILL_BONUS_ORDER: tuple[Skill, ...] = (Skill.ACE, Skill.WINGMAN, Skill.STEADY)


def profile_for(mission_type: MissionType) -> MissionProfile:
    return MISSION_PROFILES.get(mission_type, FIGHTER_PROFILE)


def stress_penalty(airframe_stress: float, sturdy: bool, rules: EffectivenessRules) -> float:
    if airframe_stress <= rules.stress_threshold:
        return 0.0
    penalty = (airframe_stress - rules.stress_threshold) / rules.stress_divisor
    if sturdy:
        penalty *= rules.sturdy_stress_factor
    return penalty


def assignment_score(
    assignment: FlightAssignment,
    profile: MissionProfile,
    rules: EffectivenessRules,
    log: MissionLog | None = None,
    factors: FactorLog | None = None,
) -> float:
    score = 0.0
    aircraft = assignment.aircraft
    pilot = assignment.pilot
    label = assignment.display_name

    def note(name: str, value: float, why: str) -> None:
        if factors is not None and value:
            factors.add(name=name, value=value, delta=f"{value:+.2f}", why=f"{label}: {why}", phase=PHASE)

    if aircraft is not None:
        airframe = profile.aircraft(aircraft.aircraft_type)
        score += airframe
        note("aircraft", airframe, f"{aircraft.aircraft_type.name} role effectiveness")
        if aircraft.aircraft_type.is_two_seater and assignment.has_gunner:
            rear = aircraft.aircraft_type.firepower_rear * rules.rear_gunner_factor
            score += rear
            note("rear_gunner", rear, "Rear gunner manning the flexible gun")

    crew = profile.crew(assignment) / profile.crew_divisor
    score += crew
    note("crew", crew, "Combined crew rating")

    if pilot is not None:
        for skill in SKILL_BONUS_ORDER:
            bonus = rules.skill_bonuses.get(skill.value, 0.0)
            if bonus and pilot.has_skill(skill):
                score += bonus
                note(f"skill_{skill.value}", bonus, f"{pilot.name} is {skill.value}")

        if aircraft is not None:
            sturdy = pilot.has_skill(Skill.STURDY)
            penalty = stress_penalty(aircraft.airframe_stress, sturdy, rules)
            if penalty > 0:
                score -= penalty
                note("airframe_stress", -penalty, f"Airframe stress {aircraft.airframe_stress:.0f}")
                if log is not None:
                    if sturdy:
                        log.add(
                            PHASE,
                            f"{pilot.name} (Sturdy) handles the twitchy airframe of "
                            f"{aircraft.tail_number} with ease.",
                        )
                    elif penalty > 1.0:
                        log.add(
                            PHASE,
                            f"WARNING: {pilot.name} struggles with the severely warped airframe of "
                            f"{aircraft.tail_number}.",
                        )

    if aircraft is not None and aircraft.aircraft_type.is_two_seater and not (
        assignment.has_gunner or assignment.has_observer
    ):
        score -= rules.solo_two_seater_penalty
        note("solo_two_seater", -rules.solo_two_seater_penalty, "Two-seater flown without a second crewman")
        if log is not None:
            pilot_name = pilot.name if pilot is not None else "Unknown"
            log.add(PHASE, f"{pilot_name} flying two-seater solo - reduced effectiveness.")

    return score


def base_bonus(base: BaseResources, rules: EffectivenessRules) -> float:
    return (
        base.training_rating * rules.training_bonus_per_rating
        + base.operations_rating * rules.operations_bonus_per_rating
    )


def friendly_score(
    sortie: Sortie,
    base: BaseResources,
    rules: EffectivenessRules,
    log: MissionLog | None = None,
    factors: FactorLog | None = None,
) -> float:
    profile = profile_for(sortie.mission_type)
    score = sum(assignment_score(a, profile, rules, log, factors) for a in sortie.assignments)
    bonus = base_bonus(base, rules)
    if factors is not None:
        factors.add(
            name="base_facilities",
            value=bonus,
            delta=f"{bonus:+.2f}",
            why=f"Training {base.training_rating}, operations {base.operations_rating}",
            phase=PHASE,
        )
    return score + bonus


def opposing_score(
    distance: int,
    intensity: ContactIntensity,
    special_event: SpecialEvent | None,
    rng: random.Random,
    rules: OppositionRules,
) -> float:
    score = (rules.base + rules.per_distance * distance) * max(int(intensity), 1)
    if special_event is not None:
        score *= rules.event_multipliers.get(special_event, 1.0)
    score += rng.randint(-rules.noise, rules.noise)
    return max(score, 1.0)
