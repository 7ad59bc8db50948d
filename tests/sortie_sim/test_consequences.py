from __future__ import annotations

import random

from hypothesis import given, settings
from hypothesis import strategies as st

from sortie_sim.domain.events import MissionLog
from sortie_sim.domain.services import Captain, Roster
from sortie_sim.domain.sortie_models import FlightAssignment, Sortie
from sortie_sim.domain.types import AircraftStatus, CrewSeat, CrewStatus, MissionType, ResultBand, Stat
from sortie_sim.rules.ruleset import Ruleset
from sortie_sim.systems.consequences import (
    apply_consequences,
    apply_losses,
    attribute_kills,
    burn_resources,
    loss_chance,
    turnaround_aircraft,
)
from tests.helpers.factories import (
    ScriptedRandom,
    make_aircraft,
    make_base,
    make_crew,
    make_sortie,
    make_two_seater_type,
)
from tests.helpers.invariants import assert_counters_non_negative, assert_resources_non_negative
from tests.helpers.strategies import band_strategy


def _rules():
    return Ruleset.default().consequences


def test_loss_table() -> None:
    assert [loss_chance(band, _rules()) for band in ResultBand] == [5, 10, 20, 30, 40, 60, 80]


def test_burn_matches_cost_helpers() -> None:
    sortie = make_sortie(distance=20)
    base = make_base(fuel=1000, ammo=100)
    log = MissionLog()
    assert burn_resources(sortie, base, _rules(), log) == (500, 25)
    assert (base.fuel, base.ammo) == (500, 75)
    assert (sortie.fuel_consumed, sortie.ammo_consumed) == (500, 25)
    assert log.lines[-1] == "Consumed: 500 fuel, 25 ammo (Logistics: 0%)."


def test_aircraft_loss_roll_uses_a_third_of_loss_chance() -> None:
    sortie = make_sortie()
    log = MissionLog()
    tally = apply_losses(sortie, ResultBand.SUCCESS, ScriptedRandom([2, 99]), _rules(), log)
    assert tally.aircraft_lost == 1
    assert sortie.aircraft_lost == 1
    assert sortie.assignments[0].aircraft.status == AircraftStatus.LOST
    assert log.lines == ["S.E.5a [B4860] was lost."]


def test_aircraft_damage_roll() -> None:
    sortie = make_sortie()
    log = MissionLog()
    apply_losses(sortie, ResultBand.SUCCESS, ScriptedRandom([3, 25, 99]), _rules(), log)
    aircraft = sortie.assignments[0].aircraft
    assert aircraft.condition == 75
    assert aircraft.status == AircraftStatus.READY
    assert sortie.aircraft_lost == 0
    assert log.lines == ["S.E.5a [B4860] took 25% damage."]


def test_damage_that_destroys_the_airframe_counts_as_a_loss() -> None:
    sortie = make_sortie()
    sortie.assignments[0].aircraft.condition = 20
    apply_losses(sortie, ResultBand.SUCCESS, ScriptedRandom([3, 25, 99]), _rules(), MissionLog())
    assert sortie.assignments[0].aircraft.status == AircraftStatus.LOST
    assert sortie.aircraft_lost == 1


def test_crew_casualties_per_seat_with_roster() -> None:
    pilot = make_crew("p1", "Arthur Rhys")
    gunner = make_crew("g1", "Tom Hale")
    roster = Roster.of([pilot, gunner])
    sortie = Sortie(mission_type=MissionType.PATROL, target_distance=20)
    sortie.add_assignment(
        FlightAssignment(
            aircraft=make_aircraft(aircraft_type=make_two_seater_type()),
            pilot=pilot,
            gunner=gunner,
        )
    )
    log = MissionLog()
    # Disaster: pilot killed below 20, gunner (chance 64) wounded from 16 to 31.
    tally = apply_losses(sortie, ResultBand.DISASTER, ScriptedRandom([99, 19, 16, 5]), _rules(), log, roster)

    assert tally.crew_killed == 1
    assert tally.crew_wounded == 1
    assert sortie.assignments[0].killed == {CrewSeat.PILOT}
    assert sortie.assignments[0].wounded == {CrewSeat.GUNNER}
    assert pilot.status == CrewStatus.KIA
    assert roster.get("p1") is None
    assert gunner.status == CrewStatus.WOUNDED
    assert gunner.recovery_days == 5
    assert "Pilot Arthur Rhys was killed in action." in log.lines
    assert "Gunner Tom Hale was wounded." in log.lines


def test_kills_require_contact_and_success() -> None:
    sortie = make_sortie()
    assert attribute_kills(sortie, ResultBand.DECISIVE_SUCCESS, False, random.Random(1), _rules(), MissionLog()) == 0
    assert attribute_kills(sortie, ResultBand.STALEMATE, True, random.Random(1), _rules(), MissionLog()) == 0
    assert sortie.enemy_kills == 0


def test_kills_are_credited_to_surviving_pilots() -> None:
    sortie = make_sortie(flights=2)
    sortie.assignments[0].aircraft.status = AircraftStatus.LOST
    captain = Captain(merit=0)
    log = MissionLog()

    kills = attribute_kills(sortie, ResultBand.SUCCESS, True, ScriptedRandom([2]), _rules(), log, captain)

    survivor = sortie.assignments[1]
    assert kills == 2
    assert sortie.enemy_kills == 2
    assert survivor.kills_this_sortie == 2
    assert survivor.pilot.aerial_victories == 2
    assert survivor.aircraft.kills == 2
    assert sortie.assignments[0].kills_this_sortie == 0
    assert captain.merit == 10
    # LRN 50 halves every raw gain.
    assert survivor.pilot.daily_improvements[Stat.GUN] == 1.0
    assert survivor.pilot.daily_improvements[Stat.OA] == 0.5
    assert log.lines[0] == "Confirmed enemy kills: 2"


def test_kill_ranges_by_band() -> None:
    for band, (low, high) in ((ResultBand.DECISIVE_SUCCESS, (2, 4)), (ResultBand.MARGINAL_SUCCESS, (0, 1))):
        for seed in range(20):
            kills = attribute_kills(make_sortie(), band, True, random.Random(seed), _rules(), MissionLog())
            assert low <= kills <= high


def test_turnaround_logs_flight_time_for_survivors() -> None:
    sortie = make_sortie(distance=20, flights=3)
    lost, worn, fresh = (a.aircraft for a in sortie.assignments)
    lost.status = AircraftStatus.LOST
    worn.condition = 40

    turnaround_aircraft(sortie, _rules())

    # Patrol at distance 20: 130 minutes -> 2 hours -> 1 point of wear.
    assert fresh.hours_flown == 2
    assert fresh.condition == 99
    assert fresh.missions_survived == 1
    assert fresh.status == AircraftStatus.READY
    assert worn.status == AircraftStatus.DAMAGED
    assert lost.missions_survived == 0
    assert lost.hours_flown == 0


@given(band=band_strategy(), seed=st.integers(min_value=0, max_value=10_000), fuel=st.integers(0, 3000))
@settings(max_examples=40)
def test_consequences_keep_counters_non_negative(band: ResultBand, seed: int, fuel: int) -> None:
    sortie = make_sortie(flights=2)
    base = make_base(fuel=fuel, ammo=20)
    apply_consequences(sortie, base, band, True, random.Random(seed), _rules(), MissionLog())
    assert_resources_non_negative(base)
    assert_counters_non_negative(sortie)
    assert sortie.aircraft_lost <= sortie.flight_count


def test_killed_pilot_in_a_surviving_aircraft_can_still_be_credited() -> None:
    sortie = make_sortie()
    sortie.assignments[0].killed.add(CrewSeat.PILOT)

    kills = attribute_kills(sortie, ResultBand.SUCCESS, True, ScriptedRandom([1]), _rules(), MissionLog())

    assert kills == 1
    assert sortie.assignments[0].pilot.aerial_victories == 1
