"""Core enums and small value types."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import TypeAlias

Vec2: TypeAlias = tuple[float, float]


class MissionType(str, Enum):
    PATROL = "patrol"
    INTERCEPTION = "interception"
    ESCORT = "escort"
    RECONNAISSANCE = "reconnaissance"
    BOMBING = "bombing"
    STRAFING = "strafing"

    @property
    def label(self) -> str:
        return self.value.title()


class RiskPosture(str, Enum):
    CONSERVATIVE = "conservative"
    STANDARD = "standard"
    AGGRESSIVE = "aggressive"


class SortieStatus(str, Enum):
    PLANNED = "planned"
    ACTIVE = "active"
    RESOLVED = "resolved"
    ABORTED = "aborted"


class ResultBand(IntEnum):
    """Outcome bands; the integer value is the severity (0 = best)."""

    DECISIVE_SUCCESS = 0
    SUCCESS = 1
    MARGINAL_SUCCESS = 2
    STALEMATE = 3
    MARGINAL_FAILURE = 4
    FAILURE = 5
    DISASTER = 6

    @property
    def label(self) -> str:
        return "".join(part.title() for part in self.name.split("_"))

    def downgrade(self, steps: int, ceiling: "ResultBand") -> "ResultBand":
        # Never returns a less severe band than self, even if ceiling is below it.
        target = min(self.value + max(0, steps), int(ceiling))
        return ResultBand(max(self.value, target))


class AircraftStatus(str, Enum):
    READY = "ready"
    ASSIGNED = "assigned"
    REPAIRING = "repairing"
    DAMAGED = "damaged"
    LOST = "lost"


class CrewStatus(str, Enum):
    ACTIVE = "active"
    WOUNDED = "wounded"
    HOSPITALIZED = "hospitalized"
    KIA = "kia"


class CrewSeat(str, Enum):
    PILOT = "pilot"
    GUNNER = "gunner"
    OBSERVER = "observer"

    @property
    def label(self) -> str:
        return self.value.title()


class SpecialEvent(str, Enum):
    ACE_ENCOUNTER = "ace_encounter"
    ZEPPELIN = "zeppelin"


class ContactIntensity(IntEnum):
    NONE = 0
    SKIRMISH = 1
    HEAVY = 2
    AMBUSH = 3


class CommandPriority(str, Enum):
    PATROL = "patrol"
    DEFENSIVE = "defensive"
    RECONNAISSANCE = "reconnaissance"
    GROUND_SUPPORT = "ground_support"
    ESCORT = "escort"
    CONSERVE_RESOURCES = "conserve_resources"


class Stat(str, Enum):
    CTL = "CTL"  # control
    GUN = "GUN"  # gunnery
    ENG = "ENG"  # energy management
    RFX = "RFX"  # reaction
    OA = "OA"  # offensive awareness
    DA = "DA"  # defensive awareness
    TA = "TA"  # team awareness
    WI = "WI"  # wingman instinct
    AGG = "AGG"  # aggression
    DIS = "DIS"  # discipline
    CMP = "CMP"  # composure
    ADP = "ADP"  # adaptability
    LDR = "LDR"  # leadership
    LRN = "LRN"  # learning rate
    STA = "STA"  # stamina


class Skill(str, Enum):
    ACE = "ace"
    WINGMAN = "wingman"
    STEADY = "steady"
    SURVIVOR = "survivor"
    OVERWATCH = "overwatch"
    PACK_HUNTER = "pack_hunter"
    FLIGHT_LEADER = "flight_leader"
    INSTRUCTOR = "instructor"
    STURDY = "sturdy"


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
