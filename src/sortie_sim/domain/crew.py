"""Crew members, traits, career log entries and stat growth."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping

from sortie_sim.domain.types import CrewStatus, Skill, Stat, clamp

logger = logging.getLogger(__name__)

STAT_MIN = 0
STAT_MAX = 100
MAX_POSITIVE_TRAITS = 3
MAX_NEGATIVE_TRAITS = 4

# Every listed stat must meet its minimum for the skill to apply.
SKILL_REQUIREMENTS: dict[Skill, dict[Stat, int]] = {
    Skill.ACE: {Stat.OA: 70, Stat.GUN: 70, Stat.ENG: 70},
    Skill.WINGMAN: {Stat.TA: 70, Stat.WI: 70, Stat.DA: 70},
    Skill.STEADY: {Stat.CMP: 70, Stat.DA: 70},
    Skill.SURVIVOR: {Stat.DA: 70, Stat.ADP: 70, Stat.CMP: 70},
    Skill.OVERWATCH: {Stat.DA: 70, Stat.TA: 70, Stat.CMP: 70},
    Skill.PACK_HUNTER: {Stat.OA: 70, Stat.TA: 70, Stat.DIS: 70},
    Skill.FLIGHT_LEADER: {Stat.LDR: 70, Stat.TA: 70},
    Skill.INSTRUCTOR: {Stat.LDR: 70, Stat.DIS: 70, Stat.LRN: 70},
    Skill.STURDY: {Stat.STA: 75, Stat.CMP: 60},
}

# (rank, merit required, missions required), lowest first.
RANK_LADDER: tuple[tuple[str, int, int], ...] = (
    ("Flight Sergeant", 0, 0),
    ("2nd Lieutenant", 50, 10),
    ("1st Lieutenant", 150, 30),
    ("Captain", 400, 75),
    ("Major", 1000, 150),
)

ROLE_REVIEW_INTERVAL = 5
SECONDARY_ROLE_MARGIN = 0.85


@dataclass(frozen=True)
class PilotTrait:
    id: str
    name: str
    description: str
    positive: bool
    modifiers: Mapping[Stat, int] = field(default_factory=dict)


@dataclass(frozen=True)
class PilotLogEntry:
    date: date | None
    mission_type: str
    narrative: str
    kills: int
    result: str
    was_wounded: bool = False
    was_shot_down: bool = False

    @property
    def date_label(self) -> str:
        if self.date is None:
            return ""
        return f"{self.date:%b} {self.date.day}, {self.date.year}"


def default_stats(value: int = 50) -> dict[Stat, int]:
    return {stat: value for stat in Stat}


def scale_improvement(amount: float, *, current: int, learning_rate: int) -> float:
    """Scale a raw improvement by learning rate, then apply diminishing returns.

    LRN 100 keeps the full amount; stats at 80+ gain half, stats at 90+ a quarter.
    """
    gain = amount * (learning_rate / 100.0)
    if current >= 90:
        gain *= 0.25
    elif current >= 80:
        gain *= 0.5
    return gain


def apply_improvements(stats: Mapping[Stat, int], pending: Mapping[Stat, float]) -> dict[Stat, int]:
    """Fold pending fractional gains into whole stat points.

    Each pending total is floored; only positive whole gains are applied and
    results never exceed STAT_MAX.
    """
    updated = dict(stats)
    for stat, amount in pending.items():
        gain = math.floor(amount)
        if gain > 0:
            updated[stat] = min(STAT_MAX, updated.get(stat, 0) + gain)
    return updated


@dataclass(eq=False)
class CrewMember:
    id: str
    name: str
    stats: dict[Stat, int] = field(default_factory=default_stats)

    missions_flown: int = 0
    aerial_victories: int = 0
    ground_targets_destroyed: int = 0

    merit: int = 0
    fatigue: float = 0.0
    rank: str = RANK_LADDER[0][0]
    primary_role: str = "Rookie"
    secondary_role: str = ""
    status: CrewStatus = CrewStatus.ACTIVE
    recovery_days: int = 0

    positive_traits: list[PilotTrait] = field(default_factory=list)
    negative_traits: list[PilotTrait] = field(default_factory=list)
    daily_improvements: dict[Stat, float] = field(default_factory=dict)
    history: list[PilotLogEntry] = field(default_factory=list)

    def stat(self, stat: Stat) -> int:
        return self.stats.get(stat, 0)

    def trait_modifier(self, stat: Stat) -> int:
        total = 0
        for trait in (*self.positive_traits, *self.negative_traits):
            total += trait.modifiers.get(stat, 0)
        return total

    def effective_stat(self, stat: Stat) -> int:
        return int(clamp(self.stat(stat) + self.trait_modifier(stat), STAT_MIN, STAT_MAX))

    def has_trait(self, trait_id: str) -> bool:
        return any(t.id == trait_id for t in (*self.positive_traits, *self.negative_traits))

    def has_skill(self, skill: Skill) -> bool:
        requirements = SKILL_REQUIREMENTS.get(skill)
        if not requirements:
            return False
        return all(self.effective_stat(stat) >= minimum for stat, minimum in requirements.items())

    # Derived ratings

    def dogfight_rating(self) -> float:
        e = self.effective_stat
        return 0.25 * e(Stat.CTL) + 0.25 * e(Stat.GUN) + 0.20 * e(Stat.OA) + 0.15 * e(Stat.RFX) + 0.15 * e(Stat.ENG)

    def energy_fighter_rating(self) -> float:
        e = self.effective_stat
        return 0.30 * e(Stat.ENG) + 0.25 * e(Stat.CTL) + 0.20 * e(Stat.OA) + 0.15 * e(Stat.DIS) + 0.10 * e(Stat.CMP)

    def ground_attack_rating(self) -> float:
        e = self.effective_stat
        return 0.30 * e(Stat.DIS) + 0.25 * e(Stat.GUN) + 0.20 * e(Stat.CTL) + 0.15 * e(Stat.CMP) + 0.10 * e(Stat.STA)

    def recon_survival_rating(self) -> float:
        e = self.effective_stat
        return 0.35 * e(Stat.DA) + 0.25 * e(Stat.OA) + 0.20 * e(Stat.ADP) + 0.20 * e(Stat.CMP)

    def overall_rating(self) -> int:
        core = (Stat.CTL, Stat.GUN, Stat.OA, Stat.DA, Stat.CMP)
        return int(round(sum(self.effective_stat(s) for s in core) / len(core)))

    # Progression

    def add_improvement(self, stat: Stat, amount: float) -> float:
        gain = scale_improvement(amount, current=self.stat(stat), learning_rate=self.stat(Stat.LRN))
        self.daily_improvements[stat] = self.daily_improvements.get(stat, 0.0) + gain
        return gain

    def apply_daily_improvements(self) -> dict[Stat, int]:
        """Commit pending gains; returns the whole points actually added per stat."""
        before = dict(self.stats)
        self.stats = apply_improvements(self.stats, self.daily_improvements)
        self.daily_improvements.clear()
        applied = {stat: self.stats[stat] - before.get(stat, 0) for stat in self.stats}
        applied = {stat: gain for stat, gain in applied.items() if gain > 0}

        if self.missions_flown % ROLE_REVIEW_INTERVAL == 0:
            self.update_roles()
        self.check_promotion()
        return applied

    def update_roles(self) -> None:
        e = self.effective_stat
        scores: dict[str, float] = {}

        fight = self.dogfight_rating()
        if fight >= 70 and e(Stat.OA) >= 65 and e(Stat.CTL) >= 65 and e(Stat.CMP) >= 45:
            scores["Fighter"] = fight
        bomb = self.ground_attack_rating()
        if bomb >= 65 and e(Stat.DIS) >= 65 and e(Stat.CMP) >= 60:
            scores["Bomber"] = bomb
        recon = self.recon_survival_rating()
        if recon >= 65 and e(Stat.DA) >= 70 and e(Stat.ADP) >= 60:
            scores["Recon"] = recon
        if e(Stat.GUN) >= 70 and e(Stat.RFX) >= 65 and e(Stat.DA) >= 60:
            scores["Gunner"] = (e(Stat.GUN) + e(Stat.RFX) + e(Stat.DA)) / 3
        if e(Stat.TA) >= 70 and e(Stat.DIS) >= 65 and e(Stat.CMP) >= 65:
            scores["Mentor"] = (e(Stat.TA) + e(Stat.DIS) + e(Stat.CMP)) / 3
        if e(Stat.GUN) >= 65 and e(Stat.AGG) >= 70 and e(Stat.DIS) >= 45:
            scores["Strafing Specialist"] = (e(Stat.GUN) + e(Stat.AGG)) / 2

        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
        if ranked:
            self.primary_role = ranked[0][0]
            if len(ranked) > 1 and ranked[1][1] > ranked[0][1] * SECONDARY_ROLE_MARGIN:
                self.secondary_role = ranked[1][0]
            else:
                self.secondary_role = ""
        elif self.missions_flown < 10:
            self.primary_role = "Rookie"
            self.secondary_role = ""

    def check_promotion(self) -> bool:
        ranks = [entry[0] for entry in RANK_LADDER]
        current = ranks.index(self.rank) if self.rank in ranks else 0
        for index in range(len(RANK_LADDER) - 1, current, -1):
            rank, merit_required, missions_required = RANK_LADDER[index]
            if self.merit >= merit_required and self.missions_flown >= missions_required:
                self.rank = rank
                logger.info("Promotion: %s promoted to %s", self.name, rank)
                return True
        return False

    def add_log_entry(self, entry: PilotLogEntry) -> None:
        self.history.append(entry)
