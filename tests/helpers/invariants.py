from __future__ import annotations

from sortie_sim.domain.crew import MAX_NEGATIVE_TRAITS, MAX_POSITIVE_TRAITS, CrewMember
from sortie_sim.domain.sortie_models import Sortie
from sortie_sim.domain.types import SortieStatus
from sortie_sim.domain.world import BaseResources


def assert_resources_non_negative(base: BaseResources) -> None:
    assert base.fuel >= 0
    assert base.ammo >= 0


def assert_counters_non_negative(sortie: Sortie) -> None:
    assert sortie.fuel_consumed >= 0
    assert sortie.ammo_consumed >= 0
    assert sortie.aircraft_lost >= 0
    assert sortie.crew_wounded >= 0
    assert sortie.crew_killed >= 0
    assert sortie.enemy_kills >= 0


def assert_crew_in_bounds(crew: CrewMember) -> None:
    for value in crew.stats.values():
        assert 0 <= value <= 100
    assert 0.0 <= crew.fatigue <= 100.0
    assert len(crew.positive_traits) <= MAX_POSITIVE_TRAITS
    assert len(crew.negative_traits) <= MAX_NEGATIVE_TRAITS


def assert_terminal(sortie: Sortie) -> None:
    assert sortie.status in (SortieStatus.RESOLVED, SortieStatus.ABORTED)
    if sortie.status == SortieStatus.RESOLVED:
        assert sortie.result_band is not None
        assert sortie.log[-1].message == f"Mission complete. Result: {sortie.result_band.label}"
