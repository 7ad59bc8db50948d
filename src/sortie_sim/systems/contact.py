from __future__ import annotations

import random
from dataclasses import dataclass

from sortie_sim.domain.events import FactorLog, MissionLog
from sortie_sim.domain.types import ContactIntensity, MissionType, SpecialEvent, clamp
from sortie_sim.rules.ruleset import ContactRules

PHASE = "contact"

SPECIAL_EVENT_MESSAGES: dict[SpecialEvent, str] = {
    SpecialEvent.ACE_ENCOUNTER: "ALERT: Intelligence reports a renowned enemy Ace has been spotted in the sector!",
    SpecialEvent.ZEPPELIN: "SIGHTING: A massive enemy Zeppelin has been spotted through the cloud layer!",
}

INTENSITY_MESSAGES: dict[ContactIntensity, str] = {
    ContactIntensity.NONE: "No enemy contact encountered.",
    ContactIntensity.SKIRMISH: "Limited enemy contact. Skirmish ensues.",
    ContactIntensity.HEAVY: "Full engagement! Heavy combat.",
    ContactIntensity.AMBUSH: "Enemy ambush! Caught off guard.",
}


@dataclass(frozen=True)
class ContactResult:
    intensity: ContactIntensity
    special_event: SpecialEvent | None
    chance: int
    roll: int

    @property
    def occurred(self) -> bool:
        return self.intensity > ContactIntensity.NONE or self.special_event is not None


def contact_chance(mission_type: MissionType, distance: int, operations_rating: int, rules: ContactRules) -> int:
    entry = rules.base_chance.get(mission_type)
    if entry is None:
        chance = rules.default_base_chance
    else:
        chance = entry.base + int(distance * entry.per_distance)
    chance -= operations_rating * rules.operations_reduction_per_rating
    return int(clamp(chance, rules.min_chance, rules.max_chance))


def intensity_for_roll(roll: int, chance: int) -> ContactIntensity:
    if roll < chance // 3:
        return ContactIntensity.NONE
    if roll < chance * 2 // 3:
        return ContactIntensity.SKIRMISH
    if roll < chance:
        return ContactIntensity.HEAVY
    return ContactIntensity.AMBUSH


def roll_special_event(mission_type: MissionType, rng: random.Random, rules: ContactRules) -> SpecialEvent | None:
    rule = rules.special_events.get(mission_type)
    if rule is None:
        return None
    if rng.randrange(100) < rule.chance:
        return rule.event
    return None


def resolve_contact(
    mission_type: MissionType,
    distance: int,
    operations_rating: int,
    rng: random.Random,
    rules: ContactRules,
    log: MissionLog,
    factors: FactorLog | None = None,
) -> ContactResult:
    log.add(PHASE, "=== PHASE 2: Contact & Engagement ===")

    # The special-event roll is drawn before, and independently of, the contact roll.
    special_event = roll_special_event(mission_type, rng, rules)
    if special_event is not None:
        log.add(PHASE, SPECIAL_EVENT_MESSAGES[special_event])

    chance = contact_chance(mission_type, distance, operations_rating, rules)
    roll = rng.randrange(100)
    intensity = intensity_for_roll(roll, chance)
    log.add(PHASE, INTENSITY_MESSAGES[intensity])

    if factors is not None:
        factors.add(
            name="contact_chance",
            value=float(chance),
            delta=f"roll {roll}",
            why=f"{mission_type.label} at distance {distance}, operations {operations_rating}",
            phase=PHASE,
        )
        if special_event is not None:
            factors.add(
                name="special_event",
                value=1.0,
                delta=special_event.value,
                why="Special event sighted before contact",
                phase=PHASE,
            )

    return ContactResult(intensity=intensity, special_event=special_event, chance=chance, roll=roll)
