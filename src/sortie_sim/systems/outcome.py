from __future__ import annotations

import random
from dataclasses import dataclass

from sortie_sim.domain.events import FactorLog, MissionLog
from sortie_sim.domain.sortie_models import Sortie
from sortie_sim.domain.types import ResultBand, RiskPosture
from sortie_sim.domain.world import BaseResources
from sortie_sim.rules.ruleset import OutcomeRules
from sortie_sim.systems import effectiveness
from sortie_sim.systems.contact import ContactResult

PHASE = "outcome"

BAND_MESSAGES: dict[ResultBand, str] = {
    ResultBand.DECISIVE_SUCCESS: "Decisive victory!",
    ResultBand.SUCCESS: "Mission successful.",
    ResultBand.MARGINAL_SUCCESS: "Marginal success achieved.",
    ResultBand.STALEMATE: "Stalemate. No clear winner.",
    ResultBand.MARGINAL_FAILURE: "Mission fell short of objectives.",
    ResultBand.FAILURE: "Mission failed.",
    ResultBand.DISASTER: "Disaster! Heavy losses sustained.",
}


@dataclass(frozen=True)
class OutcomeResult:
    band: ResultBand
    friendly_score: float | None = None
    opposing_score: float | None = None
    ratio: float | None = None

    @property
    def short_circuited(self) -> bool:
        return self.friendly_score is None


def classify_ratio(ratio: float, rules: OutcomeRules) -> ResultBand:
    for threshold, band in rules.band_thresholds:
        if ratio > threshold:
            return band
    return rules.floor_band


def risk_adjusted_ratio(friendly: float, opposing: float, risk: RiskPosture, rules: OutcomeRules) -> float:
    ratio = friendly / max(opposing, 1.0)
    return ratio * rules.risk_ratio.get(risk, 1.0)


def determine_outcome(
    sortie: Sortie,
    base: BaseResources,
    contact: ContactResult,
    rng: random.Random,
    rules: OutcomeRules,
    log: MissionLog,
    factors: FactorLog | None = None,
) -> OutcomeResult:
    log.add(PHASE, "=== PHASE 3: Outcome Determination ===")

    if not contact.occurred:
        log.add(PHASE, "Mission completed without opposition.")
        return OutcomeResult(band=ResultBand.SUCCESS)

    friendly = effectiveness.friendly_score(sortie, base, rules.effectiveness, log, factors)
    opposing = effectiveness.opposing_score(
        sortie.target_distance,
        contact.intensity,
        contact.special_event,
        rng,
        rules.opposition,
    )
    log.add(PHASE, f"Friendly Score: {friendly:.1f} vs Enemy Score: {opposing:.1f}")

    ratio = risk_adjusted_ratio(friendly, opposing, sortie.risk, rules)
    band = classify_ratio(ratio, rules)
    log.add(PHASE, BAND_MESSAGES[band])

    if factors is not None:
        factors.add(
            name="opposition",
            value=-opposing,
            delta=f"{-opposing:+.2f}",
            why=f"Enemy strength at intensity {int(contact.intensity)}",
            phase=PHASE,
        )
        risk_factor = rules.risk_ratio.get(sortie.risk, 1.0)
        if risk_factor != 1.0:
            factors.add(
                name="risk_posture",
                value=risk_factor,
                delta=f"x{risk_factor:.2f}",
                why=f"{sortie.risk.value.title()} posture",
                phase=PHASE,
            )

    return OutcomeResult(band=band, friendly_score=friendly, opposing_score=opposing, ratio=ratio)
