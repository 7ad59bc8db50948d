"""Collaborator interfaces the resolver calls out to, plus in-memory implementations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Protocol, Sequence

from sortie_sim.domain.crew import CrewMember
from sortie_sim.domain.types import CrewStatus
from sortie_sim.domain.world import MapLocation

logger = logging.getLogger(__name__)


class RosterService(Protocol):
    def get(self, crew_id: str) -> CrewMember | None: ...

    def wound(self, crew: CrewMember, recovery_days: int) -> None: ...

    def kill(self, crew: CrewMember) -> None: ...

    def hospitalize(self, crew: CrewMember, recovery_days: int) -> None: ...


class CaptainService(Protocol):
    def add_merit(self, amount: int) -> None: ...


class SectorMapService(Protocol):
    @property
    def locations(self) -> Sequence[MapLocation]: ...

    def mark_discovered(self, location: MapLocation, on: date | None) -> None: ...


@dataclass()
class Roster:
    members: dict[str, CrewMember] = field(default_factory=dict)

    @classmethod
    def of(cls, crew: Iterable[CrewMember]) -> "Roster":
        return cls(members={member.id: member for member in crew})

    def get(self, crew_id: str) -> CrewMember | None:
        return self.members.get(crew_id)

    def wound(self, crew: CrewMember, recovery_days: int) -> None:
        if crew.status == CrewStatus.KIA:
            return
        crew.status = CrewStatus.WOUNDED
        crew.recovery_days = max(crew.recovery_days, recovery_days)
        logger.info("%s wounded; recovery %d days", crew.name, recovery_days)

    def kill(self, crew: CrewMember) -> None:
        crew.status = CrewStatus.KIA
        crew.recovery_days = 0
        self.members.pop(crew.id, None)
        logger.info("%s killed in action", crew.name)

    def hospitalize(self, crew: CrewMember, recovery_days: int) -> None:
        if crew.status == CrewStatus.KIA:
            return
        crew.status = CrewStatus.HOSPITALIZED
        crew.recovery_days = max(crew.recovery_days, recovery_days)
        logger.info("%s hospitalized; recovery %d days", crew.name, recovery_days)


# (rank, merit required), lowest first.
CAPTAIN_RANKS: tuple[tuple[str, int], ...] = (
    ("Second Lieutenant", 0),
    ("Lieutenant", 50),
    ("Captain", 150),
    ("Major", 400),
    ("Lieutenant Colonel", 800),
    ("Colonel", 1500),
)


@dataclass()
class Captain:
    name: str = "James Whitmore"
    rank: str = "Captain"
    merit: int = 0

    def add_merit(self, amount: int) -> None:
        self.merit += amount
        self._check_promotion()

    def merit_to_next_rank(self) -> int:
        index = self._rank_index()
        if index < len(CAPTAIN_RANKS) - 1:
            return CAPTAIN_RANKS[index + 1][1] - self.merit
        return 0

    def _rank_index(self) -> int:
        for index, (rank, _) in enumerate(CAPTAIN_RANKS):
            if rank == self.rank:
                return index
        return 0

    def _check_promotion(self) -> None:
        # Promote only; merit never demotes.
        current = self._rank_index()
        for index, (rank, required) in enumerate(CAPTAIN_RANKS):
            if index > current and self.merit >= required:
                self.rank = rank
                current = index
                logger.info("Promotion: %s promoted to %s", self.name, rank)


@dataclass()
class SectorMap:
    name: str = "Sector"
    _locations: list[MapLocation] = field(default_factory=list)

    @classmethod
    def of(cls, locations: Iterable[MapLocation], name: str = "Sector") -> "SectorMap":
        return cls(name=name, _locations=list(locations))

    @property
    def locations(self) -> Sequence[MapLocation]:
        return tuple(self._locations)

    def discovered(self) -> list[MapLocation]:
        return [loc for loc in self._locations if loc.discovered]

    def mark_discovered(self, location: MapLocation, on: date | None) -> None:
        location.discovered = True
        location.discovered_on = on
        logger.info("Location discovered: %s", location.name)
