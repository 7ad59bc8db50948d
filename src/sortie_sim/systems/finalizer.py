from __future__ import annotations

from sortie_sim.domain.events import MissionLog
from sortie_sim.domain.sortie_models import Sortie
from sortie_sim.domain.types import ResultBand
from sortie_sim.rules.ruleset import ExchangeRules

PHASE = "finalize"


def finalize_band(
    band: ResultBand,
    enemy_kills: int,
    crew_killed: int,
    rules: ExchangeRules,
) -> ResultBand:
    """Temper a successful band by the kill exchange. Never improves the band."""
    if band > ResultBand.MARGINAL_SUCCESS or crew_killed <= 0:
        return band
    exchange_ratio = enemy_kills / crew_killed
    if exchange_ratio < rules.severe_ratio:
        return band.downgrade(rules.severe_steps, rules.severe_ceiling)
    if exchange_ratio < rules.mild_ratio:
        return band.downgrade(rules.mild_steps, rules.mild_ceiling)
    return band


def finalize_result(sortie: Sortie, band: ResultBand, rules: ExchangeRules, log: MissionLog) -> ResultBand:
    final = finalize_band(band, sortie.enemy_kills, sortie.crew_killed, rules)
    if final != band:
        log.add(
            PHASE,
            f"RESULT ADJUSTED: Objectives were met, but heavy casualties "
            f"({sortie.enemy_kills} vs {sortie.crew_killed}) have tempered the outcome.",
        )
    return final
