"""Airbase resources, map locations and the daily command directive."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from sortie_sim.domain.types import CommandPriority, MissionType, Vec2, clamp

MIN_RATING = 1
MAX_RATING = 5


@dataclass()
class BaseResources:
    name: str = "Home Airfield"
    fuel: int = 0
    ammo: int = 0
    runway_rating: int = 1
    maintenance_rating: int = 1
    operations_rating: int = 1
    training_rating: int = 1
    lodging_rating: int = 1
    medical_rating: int = 1

    def __post_init__(self) -> None:
        for name in (
            "runway_rating",
            "maintenance_rating",
            "operations_rating",
            "training_rating",
            "lodging_rating",
            "medical_rating",
        ):
            setattr(self, name, int(clamp(getattr(self, name), MIN_RATING, MAX_RATING)))

    @property
    def efficiency_bonus(self) -> float:
        # Operations centre improves logistics planning: 0% at level 1, +5% per level.
        return clamp((self.operations_rating - 1) * 0.05, 0.0, 1.0)

    def spend(self, *, fuel: int, ammo: int) -> None:
        self.fuel = max(0, self.fuel - max(0, fuel))
        self.ammo = max(0, self.ammo - max(0, ammo))


@dataclass(eq=False)
class MapLocation:
    id: str
    name: str
    coordinates: Vec2
    kind: str = "unknown"
    discovered: bool = False
    discovered_on: date | None = None


_PRIORITY_MISSIONS: dict[CommandPriority, frozenset[MissionType]] = {
    CommandPriority.PATROL: frozenset({MissionType.PATROL}),
    CommandPriority.DEFENSIVE: frozenset({MissionType.INTERCEPTION, MissionType.PATROL}),
    CommandPriority.RECONNAISSANCE: frozenset({MissionType.RECONNAISSANCE}),
    CommandPriority.GROUND_SUPPORT: frozenset({MissionType.BOMBING, MissionType.STRAFING}),
    CommandPriority.ESCORT: frozenset({MissionType.ESCORT}),
    CommandPriority.CONSERVE_RESOURCES: frozenset(),
}


@dataclass(frozen=True)
class DailyDirective:
    priority: CommandPriority
    allowed_types: frozenset[MissionType] = field(default_factory=frozenset)
    conserve_resources: bool = False

    @classmethod
    def for_priority(cls, priority: CommandPriority) -> "DailyDirective":
        return cls(
            priority=priority,
            allowed_types=_PRIORITY_MISSIONS.get(priority, frozenset()),
            conserve_resources=priority == CommandPriority.CONSERVE_RESOURCES,
        )

    def follows_orders(self, mission_type: MissionType) -> bool:
        # An empty allow-list means command named no preferred mission type.
        return not self.allowed_types or mission_type in self.allowed_types

    @property
    def label(self) -> str:
        return self.priority.value.replace("_", " ").title()
