"""Daily order compliance."""

from __future__ import annotations

from dataclasses import dataclass

from sortie_sim.domain.types import MissionType
from sortie_sim.domain.world import DailyDirective

CONSERVE_BONUS = -5
DEVIATION_BONUS = -5
DEFAULT_MATCH_BONUS = 10
MATCH_BONUS: dict[MissionType, int] = {
    MissionType.RECONNAISSANCE: 15,
    MissionType.ESCORT: 15,
    MissionType.BOMBING: 20,
    MissionType.STRAFING: 20,
}


@dataclass(frozen=True)
class OrderCompliance:
    followed: bool
    bonus: int
    message: str = ""
    log_line: str | None = None


def evaluate_orders(mission_type: MissionType, directive: DailyDirective | None) -> OrderCompliance:
    """Score a mission type against today's directive. Never fails."""
    if directive is None:
        return OrderCompliance(followed=True, bonus=0)

    followed = directive.follows_orders(mission_type)
    if directive.conserve_resources:
        return OrderCompliance(
            followed=followed,
            bonus=CONSERVE_BONUS,
            message="Command advised conservation - mission flown anyway.",
            log_line="Note: Command requested we conserve resources today.",
        )
    if followed:
        bonus = MATCH_BONUS.get(mission_type, DEFAULT_MATCH_BONUS)
        return OrderCompliance(
            followed=True,
            bonus=bonus,
            message=f"Orders followed - HQ commends the squadron. (+{bonus} prestige)",
            log_line=f"Mission matches today's priority: {directive.label}",
        )
    return OrderCompliance(
        followed=False,
        bonus=DEVIATION_BONUS,
        message="Mission type did not match command priority.",
        log_line=f"Warning: Command requested {directive.label} operations.",
    )
