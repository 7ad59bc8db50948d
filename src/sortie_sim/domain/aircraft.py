"""Aircraft types (static catalog data) and aircraft units (airframes on the flight line)."""

from __future__ import annotations

from dataclasses import dataclass

from sortie_sim.domain.types import AircraftStatus

DAMAGED_CONDITION_THRESHOLD = 50


@dataclass(frozen=True)
class AircraftType:
    """Static performance profile for one aircraft model.

    Ratings are on the catalog's 1-10 scale; role skills are 0-10.
    """

    id: str
    name: str
    nation: str = ""

    speed: int = 5
    climb: int = 5
    turn: int = 5
    stability: int = 5
    dive_safety: int = 5
    ceiling: int = 5
    distance: int = 5

    fighter_role: int = 0
    bomber_role: int = 0
    recon_role: int = 0

    firepower: int = 5
    accuracy: int = 5
    ammo: int = 5
    crew_seats: int = 1
    firepower_rear: int = 0

    airframe_strength: int = 5
    engine_durability: int = 5
    pilot_protection: int = 5
    fuel_vulnerability: int = 5
    reliability: int = 5

    runway_requirement: int = 1
    fuel_consumption: int = 5

    @property
    def is_two_seater(self) -> bool:
        return self.crew_seats >= 2

    def fighter_effectiveness(self) -> float:
        return (
            self.fighter_role
            + 0.6 * (self.speed + self.climb + self.turn)
            + 0.7 * self.firepower
            + 0.5 * self.accuracy
            + 0.3 * (self.stability + self.dive_safety)
        )

    def bomber_effectiveness(self) -> float:
        return (
            self.bomber_role
            + 0.7 * self.distance
            + 0.6 * self.stability
            + 0.6 * self.reliability
            + 0.3 * self.ammo
            + 0.3 * self.airframe_strength
        )

    def recon_effectiveness(self) -> float:
        return (
            self.recon_role
            + 0.7 * self.distance
            + 0.6 * self.ceiling
            + 0.4 * self.speed
            + 0.6 * self.stability
            + 0.5 * self.reliability
        )

    def durability_score(self) -> float:
        return (
            0.6 * self.airframe_strength
            + 0.5 * self.engine_durability
            + 0.4 * self.pilot_protection
            + 0.2 * self.reliability
            - 0.6 * self.fuel_vulnerability
        )


@dataclass()
class AircraftUnit:
    aircraft_type: AircraftType
    tail_number: str
    condition: int = 100
    status: AircraftStatus = AircraftStatus.READY
    airframe_stress: float = 0.0
    hours_flown: int = 0
    missions_survived: int = 0
    kills: int = 0

    @property
    def display_name(self) -> str:
        return f"{self.aircraft_type.name} [{self.tail_number}]"

    @property
    def crew_seats(self) -> int:
        return self.aircraft_type.crew_seats

    @property
    def is_lost(self) -> bool:
        return self.status == AircraftStatus.LOST

    def apply_damage(self, damage: int) -> None:
        self.condition = max(0, self.condition - max(0, damage))
        if self.condition <= 0:
            self.status = AircraftStatus.LOST
        elif self.condition < DAMAGED_CONDITION_THRESHOLD:
            self.status = AircraftStatus.DAMAGED

    def add_flight_time(self, hours: int) -> None:
        self.hours_flown += max(0, hours)
        self.condition = max(0, self.condition - max(0, hours) // 2)
