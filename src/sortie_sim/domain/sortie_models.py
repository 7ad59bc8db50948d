from __future__ import annotations

from dataclasses import dataclass, field

from sortie_sim.domain.aircraft import AircraftUnit
from sortie_sim.domain.crew import CrewMember
from sortie_sim.domain.events import MissionLogEntry
from sortie_sim.domain.types import (
    CrewSeat,
    MissionType,
    ResultBand,
    RiskPosture,
    SortieStatus,
    Stat,
    Vec2,
)

MIN_TARGET_DISTANCE = 1
MAX_TARGET_DISTANCE = 150


@dataclass(eq=False)
class FlightAssignment:
    aircraft: AircraftUnit | None
    pilot: CrewMember | None
    gunner: CrewMember | None = None
    observer: CrewMember | None = None

    kills_this_sortie: int = 0
    wounded: set[CrewSeat] = field(default_factory=set)
    killed: set[CrewSeat] = field(default_factory=set)

    def is_valid(self) -> bool:
        return self.aircraft is not None and self.pilot is not None

    @property
    def is_two_seater(self) -> bool:
        return self.aircraft is not None and self.aircraft.crew_seats >= 2

    @property
    def has_gunner(self) -> bool:
        return self.gunner is not None

    @property
    def has_observer(self) -> bool:
        return self.observer is not None

    def seats(self) -> list[tuple[CrewSeat, CrewMember]]:
        filled: list[tuple[CrewSeat, CrewMember]] = []
        for seat, crew in (
            (CrewSeat.PILOT, self.pilot),
            (CrewSeat.GUNNER, self.gunner),
            (CrewSeat.OBSERVER, self.observer),
        ):
            if crew is not None:
                filled.append((seat, crew))
        return filled

    def crew_count(self) -> int:
        return len(self.seats())

    @property
    def display_name(self) -> str:
        name = self.aircraft.display_name if self.aircraft else "No Aircraft"
        name += f" - {self.pilot.name if self.pilot else 'No Pilot'}"
        if self.gunner is not None:
            name += f" / {self.gunner.name} (Gunner)"
        if self.observer is not None:
            name += f" / {self.observer.name} (Observer)"
        return name

    # Combined crew ratings

    def combined_dogfight_rating(self) -> float:
        rating = self.pilot.dogfight_rating() if self.pilot else 0.0
        if self.gunner is not None:
            rating += 0.3 * self.gunner.stat(Stat.GUN)
            rating += 0.2 * self.gunner.stat(Stat.DA)
        return rating

    def combined_recon_rating(self) -> float:
        rating = self.pilot.recon_survival_rating() if self.pilot else 0.0
        if self.observer is not None:
            rating += 0.5 * self.observer.stat(Stat.OA)
            rating += 0.3 * self.observer.stat(Stat.TA)
        elif self.gunner is not None:
            rating += 0.2 * self.gunner.stat(Stat.OA)
        return rating

    def defensive_rating(self) -> float:
        rating = float(self.pilot.stat(Stat.DA)) if self.pilot else 0.0
        if self.gunner is not None:
            rating += 0.5 * self.gunner.stat(Stat.GUN)
            rating += 0.3 * self.gunner.stat(Stat.RFX)
            rating += 0.2 * self.gunner.stat(Stat.DA)
        return rating

    def bombing_rating(self) -> float:
        rating = self.pilot.ground_attack_rating() if self.pilot else 0.0
        if self.observer is not None:
            rating += 0.3 * self.observer.stat(Stat.OA)
            rating += 0.2 * self.observer.stat(Stat.DIS)
        elif self.gunner is not None:
            rating += 0.1 * self.gunner.stat(Stat.DIS)
        return rating


@dataclass()
class Sortie:
    mission_type: MissionType
    target_distance: int = 1
    risk: RiskPosture = RiskPosture.STANDARD
    status: SortieStatus = SortieStatus.PLANNED
    assignments: list[FlightAssignment] = field(default_factory=list)
    waypoints: list[Vec2] = field(default_factory=list)

    result_band: ResultBand | None = None
    log: tuple[MissionLogEntry, ...] = ()

    fuel_consumed: int = 0
    ammo_consumed: int = 0
    aircraft_lost: int = 0
    crew_wounded: int = 0
    crew_killed: int = 0
    enemy_kills: int = 0

    followed_orders: bool = True
    order_bonus: int = 0
    order_message: str = ""

    def __post_init__(self) -> None:
        self.target_distance = max(MIN_TARGET_DISTANCE, min(MAX_TARGET_DISTANCE, int(self.target_distance)))

    def add_assignment(self, assignment: FlightAssignment) -> None:
        if not assignment.is_valid():
            raise ValueError("Flight assignment needs both an aircraft and a pilot")
        crew_ids = [crew.id for _, crew in assignment.seats()]
        if len(set(crew_ids)) != len(crew_ids):
            raise ValueError("A crew member can only fill one seat")

        tail_number = assignment.aircraft.tail_number
        if any(a.aircraft is not None and a.aircraft.tail_number == tail_number for a in self.assignments):
            raise ValueError(f"Aircraft {tail_number} is already assigned to this sortie")
        assigned = {crew.id for crew in self.all_crew()}
        for _, crew in assignment.seats():
            if crew.id in assigned:
                raise ValueError(f"{crew.name} is already assigned to this sortie")
        self.assignments.append(assignment)

    @property
    def flight_count(self) -> int:
        return len(self.assignments)

    def total_crew(self) -> int:
        return sum(a.crew_count() for a in self.assignments)

    def all_crew(self) -> list[CrewMember]:
        return [crew for a in self.assignments for _, crew in a.seats()]

    @property
    def log_lines(self) -> list[str]:
        return [entry.message for entry in self.log]
