"""Sortie reports returned to the caller."""

from __future__ import annotations

from dataclasses import dataclass, field

from sortie_sim.domain.events import FactorEvent, MissionLogEntry
from sortie_sim.domain.types import ContactIntensity, ResultBand, SortieStatus, SpecialEvent, Stat


@dataclass(frozen=True)
class TopFactor:
    name: str
    value: float
    delta: str
    why: str


@dataclass(frozen=True)
class PilotProgress:
    crew_id: str
    name: str
    fatigue_gain: float
    merit_gain: int
    pending_gains: dict[Stat, float]
    applied_gains: dict[Stat, int]
    new_trait: str | None = None
    hospitalized: bool = False


@dataclass(frozen=True)
class SortieReport:
    status: SortieStatus
    result_band: ResultBand | None
    intensity: ContactIntensity | None
    special_event: SpecialEvent | None
    fuel_consumed: int
    ammo_consumed: int
    aircraft_lost: int
    crew_wounded: int
    crew_killed: int
    enemy_kills: int
    friendly_score: float | None
    opposing_score: float | None
    log: tuple[MissionLogEntry, ...]
    events: list[FactorEvent] = field(default_factory=list)
    top_factors: list[TopFactor] = field(default_factory=list)
    pilots: list[PilotProgress] = field(default_factory=list)
    discovered: list[str] = field(default_factory=list)

    @property
    def aborted(self) -> bool:
        return self.status == SortieStatus.ABORTED

    @property
    def log_lines(self) -> list[str]:
        return [entry.message for entry in self.log]
