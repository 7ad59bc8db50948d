from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sortie_sim.domain.events import MissionLog
from sortie_sim.domain.types import ResultBand
from sortie_sim.rules.ruleset import Ruleset
from sortie_sim.systems.finalizer import finalize_band, finalize_result
from tests.helpers.factories import make_sortie
from tests.helpers.strategies import band_strategy


def _exchange():
    return Ruleset.default().outcome.exchange


@pytest.mark.parametrize(
    ("band", "kills", "killed", "expected"),
    [
        (ResultBand.SUCCESS, 1, 2, ResultBand.STALEMATE),
        (ResultBand.DECISIVE_SUCCESS, 2, 1, ResultBand.SUCCESS),
        (ResultBand.MARGINAL_SUCCESS, 0, 1, ResultBand.MARGINAL_FAILURE),
        (ResultBand.MARGINAL_SUCCESS, 2, 1, ResultBand.STALEMATE),
        (ResultBand.SUCCESS, 3, 1, ResultBand.SUCCESS),
        (ResultBand.DECISIVE_SUCCESS, 0, 0, ResultBand.DECISIVE_SUCCESS),
        (ResultBand.STALEMATE, 0, 4, ResultBand.STALEMATE),
        (ResultBand.DISASTER, 0, 4, ResultBand.DISASTER),
    ],
)
def test_exchange_adjustment(band: ResultBand, kills: int, killed: int, expected: ResultBand) -> None:
    assert finalize_band(band, kills, killed, _exchange()) == expected


def test_adjustment_is_logged_only_on_change() -> None:
    sortie = make_sortie()
    sortie.enemy_kills = 1
    sortie.crew_killed = 2
    log = MissionLog()

    assert finalize_result(sortie, ResultBand.SUCCESS, _exchange(), log) == ResultBand.STALEMATE
    assert log.lines == [
        "RESULT ADJUSTED: Objectives were met, but heavy casualties (1 vs 2) have tempered the outcome."
    ]

    quiet = MissionLog()
    sortie.crew_killed = 0
    assert finalize_result(sortie, ResultBand.SUCCESS, _exchange(), quiet) == ResultBand.SUCCESS
    assert len(quiet) == 0


@given(band=band_strategy(), kills=st.integers(0, 6), killed=st.integers(0, 8))
def test_finalizer_never_improves_a_band(band: ResultBand, kills: int, killed: int) -> None:
    final = finalize_band(band, kills, killed, _exchange())
    assert final >= band
    if band > ResultBand.MARGINAL_SUCCESS:
        assert final == band
