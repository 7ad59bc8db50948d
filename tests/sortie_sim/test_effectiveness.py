from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sortie_sim.domain.events import FactorLog, FactorScope, MissionLog
from sortie_sim.domain.sortie_models import FlightAssignment
from sortie_sim.domain.types import ContactIntensity, MissionType, SpecialEvent
from sortie_sim.rules.ruleset import Ruleset
from sortie_sim.systems.effectiveness import (
    assignment_score,
    base_bonus,
    friendly_score,
    opposing_score,
    profile_for,
    stress_penalty,
)
from tests.helpers.factories import (
    ScriptedRandom,
    make_aircraft,
    make_base,
    make_crew,
    make_fighter_type,
    make_sortie,
    make_two_seater_type,
)
from tests.helpers.strategies import intensity_strategy, special_event_strategy


def _rules():
    return Ruleset.default().outcome


def test_patrol_score_is_airframe_plus_crew_plus_base() -> None:
    sortie = make_sortie(mission_type=MissionType.PATROL)
    assignment = sortie.assignments[0]
    base = make_base(training_rating=2, operations_rating=3)

    expected = (
        assignment.aircraft.aircraft_type.fighter_effectiveness()
        + assignment.combined_dogfight_rating() / 10
        + 2 * 0.5
        + 3 * 0.3
    )
    assert friendly_score(sortie, base, _rules().effectiveness) == pytest.approx(expected)


def test_escort_blends_fighter_and_durability() -> None:
    sortie = make_sortie(mission_type=MissionType.ESCORT)
    assignment = sortie.assignments[0]
    aircraft_type = assignment.aircraft.aircraft_type
    expected = (aircraft_type.fighter_effectiveness() + aircraft_type.durability_score()) / 2 + (
        assignment.combined_dogfight_rating() + assignment.defensive_rating()
    ) / 20
    score = assignment_score(assignment, profile_for(MissionType.ESCORT), _rules().effectiveness)
    assert score == pytest.approx(expected)


def test_unlisted_mission_types_score_as_fighters() -> None:
    assert profile_for(MissionType.STRAFING) is profile_for(MissionType.PATROL)


def test_skill_bonuses_apply_to_pilot() -> None:
    plain = FlightAssignment(aircraft=make_aircraft(), pilot=make_crew())
    ace = FlightAssignment(aircraft=make_aircraft(), pilot=make_crew(oa=75, gun=75, eng=75))
    profile = profile_for(MissionType.PATROL)
    rules = _rules().effectiveness
    ace_crew_delta = (ace.combined_dogfight_rating() - plain.combined_dogfight_rating()) / 10
    diff = assignment_score(ace, profile, rules) - assignment_score(plain, profile, rules)
    assert diff == pytest.approx(3.0 + ace_crew_delta)


def test_stress_penalty_and_sturdy_quarter() -> None:
    rules = _rules().effectiveness
    assert stress_penalty(20.0, False, rules) == 0.0
    assert stress_penalty(50.0, False, rules) == pytest.approx(1.0)
    assert stress_penalty(50.0, True, rules) == pytest.approx(0.25)


def test_solo_two_seater_penalty_and_rear_gunner() -> None:
    rules = _rules().effectiveness
    profile = profile_for(MissionType.PATROL)
    two_seater = make_two_seater_type()
    pilot = make_crew()
    gunner = make_crew("g1", "Tom Hale", gun=0, da=0, rfx=0, oa=0)

    solo = FlightAssignment(aircraft=make_aircraft(aircraft_type=two_seater), pilot=pilot)
    crewed = FlightAssignment(aircraft=make_aircraft(aircraft_type=two_seater), pilot=pilot, gunner=gunner)

    log = MissionLog()
    solo_score = assignment_score(solo, profile, rules, log)
    crewed_score = assignment_score(crewed, profile, rules)
    assert crewed_score - solo_score == pytest.approx(2.0 + two_seater.firepower_rear * 0.5)
    assert log.lines == ["Arthur Rhys flying two-seater solo - reduced effectiveness."]


def test_single_seater_is_never_penalized_as_solo() -> None:
    rules = _rules().effectiveness
    assignment = FlightAssignment(aircraft=make_aircraft(aircraft_type=make_fighter_type()), pilot=make_crew())
    log = MissionLog()
    assignment_score(assignment, profile_for(MissionType.PATROL), rules, log)
    assert log.lines == []


def test_contributions_are_recorded_as_factors() -> None:
    factors = FactorLog(scope=FactorScope(kind="sortie", id="patrol"))
    friendly_score(make_sortie(), make_base(), _rules().effectiveness, factors=factors)
    names = {event.name for event in factors.events}
    assert {"aircraft", "crew", "base_facilities"} <= names


def test_base_bonus() -> None:
    assert base_bonus(make_base(training_rating=5, operations_rating=5), _rules().effectiveness) == pytest.approx(4.0)


def test_opposing_score_formula() -> None:
    rules = _rules().opposition
    # randint(-3, 3) draws randrange(-3, 4); script the noise to +2.
    assert opposing_score(20, ContactIntensity.HEAVY, None, ScriptedRandom([2]), rules) == pytest.approx(20.0)
    assert opposing_score(20, ContactIntensity.NONE, SpecialEvent.ACE_ENCOUNTER, ScriptedRandom([0]), rules) == (
        pytest.approx(22.5)
    )
    assert opposing_score(20, ContactIntensity.SKIRMISH, SpecialEvent.ZEPPELIN, ScriptedRandom([-3]), rules) == (
        pytest.approx(24.0)
    )


@given(
    distance=st.integers(min_value=1, max_value=150),
    intensity=intensity_strategy(),
    event=special_event_strategy(),
    noise=st.integers(min_value=-3, max_value=3),
)
def test_opposing_score_is_at_least_one(distance, intensity, event, noise) -> None:
    score = opposing_score(distance, intensity, event, ScriptedRandom([noise]), _rules().opposition)
    assert score >= 1.0
