"""Data-driven rules engine."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from sortie_sim.domain.crew import PilotTrait
from sortie_sim.domain.types import MissionType, ResultBand, RiskPosture, SpecialEvent, Stat

DEFAULT_RULES_DIR = Path(__file__).resolve().parent.parent / "data" / "rules"


class RulesError(ValueError):
    """Error loading or validating rules."""


@dataclass(frozen=True)
class ContactChance:
    base: int
    per_distance: float


@dataclass(frozen=True)
class SpecialEventRule:
    event: SpecialEvent
    chance: int


@dataclass(frozen=True)
class ContactRules:
    base_chance: dict[MissionType, ContactChance]
    default_base_chance: int
    operations_reduction_per_rating: int
    min_chance: int
    max_chance: int
    special_events: dict[MissionType, SpecialEventRule]


@dataclass(frozen=True)
class EffectivenessRules:
    skill_bonuses: dict[str, float]
    rear_gunner_factor: float
    stress_threshold: float
    stress_divisor: float
    sturdy_stress_factor: float
    solo_two_seater_penalty: float
    training_bonus_per_rating: float
    operations_bonus_per_rating: float


@dataclass(frozen=True)
class OppositionRules:
    base: float
    per_distance: float
    noise: int
    event_multipliers: dict[SpecialEvent, float]


@dataclass(frozen=True)
class ExchangeRules:
    severe_ratio: float
    severe_steps: int
    severe_ceiling: ResultBand
    mild_ratio: float
    mild_steps: int
    mild_ceiling: ResultBand


@dataclass(frozen=True)
class OutcomeRules:
    effectiveness: EffectivenessRules
    opposition: OppositionRules
    risk_ratio: dict[RiskPosture, float]
    band_thresholds: tuple[tuple[float, ResultBand], ...]
    floor_band: ResultBand
    exchange: ExchangeRules


@dataclass(frozen=True)
class CostRules:
    fuel_per_distance: int
    ammo_per_unit: int
    ammo_multiplier: dict[MissionType, int]
    min_fuel: int
    min_ammo: int
    max_efficiency: float


@dataclass(frozen=True)
class MissionDuration:
    base: int
    per_distance: int


@dataclass(frozen=True)
class ConsequenceRules:
    costs: CostRules
    loss_chance: dict[ResultBand, int]
    default_loss_chance: int
    secondary_crew_factor: float
    damage_range: tuple[int, int]
    wound_recovery_days: tuple[int, int]
    kill_ranges: dict[ResultBand, tuple[int, int]]
    kill_gains: dict[Stat, float]
    captain_merit_per_kill: int
    mission_duration: dict[MissionType, MissionDuration]


@dataclass(frozen=True)
class FatigueRules:
    base: float
    per_distance: float
    max: float
    risk_multiplier: dict[RiskPosture, float]


@dataclass(frozen=True)
class OrderRules:
    gains: dict[Stat, float]
    merit: int
    captain_merit: int


@dataclass(frozen=True)
class TraitRules:
    base_chance: int
    fatigue_threshold: float
    fatigue_bonus: int
    disaster_bonus: int
    decisive_bonus: int
    hospital_days: tuple[int, int]
    positive: tuple[PilotTrait, ...]
    negative: tuple[PilotTrait, ...]


@dataclass(frozen=True)
class DiscoveryRules:
    path_radius: float
    base_chance: float
    distance_divisor: float
    recon_divisor: float


@dataclass(frozen=True)
class ProgressionRules:
    participation: dict[Stat, float]
    fatigue: FatigueRules
    mission_bonuses: dict[MissionType, dict[Stat, float]]
    survival_bonus: dict[Stat, float]
    orders: OrderRules
    outcome_merit: dict[ResultBand, int]
    traits: TraitRules
    discovery: DiscoveryRules


@dataclass(frozen=True)
class Ruleset:
    """Loaded and validated ruleset."""

    contact: ContactRules
    outcome: OutcomeRules
    consequences: ConsequenceRules
    progression: ProgressionRules
    narratives: dict[str, tuple[str, ...]]

    @staticmethod
    def load(data_dir: Path) -> "Ruleset":
        """Load ruleset from JSON files in data directory."""
        return Ruleset(
            contact=_load_contact(data_dir / "contact.json"),
            outcome=_load_outcome(data_dir / "outcome.json"),
            consequences=_load_consequences(data_dir / "consequences.json"),
            progression=_load_progression(data_dir / "progression.json"),
            narratives=_load_narratives(data_dir / "narratives.json"),
        )

    @staticmethod
    def default() -> "Ruleset":
        """Packaged ruleset, loaded once per process."""
        return _default_ruleset()


@lru_cache(maxsize=1)
def _default_ruleset() -> Ruleset:
    return Ruleset.load(DEFAULT_RULES_DIR)


def _load_json(path: Path) -> dict[str, Any]:
    """Load JSON file."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError as exc:
        raise RulesError(f"Rules file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise RulesError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise RulesError(f"{path}: top-level value must be object")
    return data


def _enum_key(enum_cls: Any, key: str, path: Path) -> Any:
    try:
        return enum_cls(key)
    except ValueError as exc:
        raise RulesError(f"{path}: unknown {enum_cls.__name__} '{key}'") from exc


def _band(key: str, path: Path) -> ResultBand:
    try:
        return ResultBand[str(key).upper()]
    except KeyError as exc:
        raise RulesError(f"{path}: unknown result band '{key}'") from exc


def _pair(value: Any, path: Path, name: str) -> tuple[int, int]:
    if not isinstance(value, list) or len(value) != 2:
        raise RulesError(f"{path}: {name} must be [min, max]")
    low, high = int(value[0]), int(value[1])
    if low > high:
        raise RulesError(f"{path}: {name} min exceeds max")
    return low, high


def _stat_map(value: Any, path: Path) -> dict[Stat, float]:
    if not isinstance(value, dict):
        raise RulesError(f"{path}: stat gains must be object")
    return {_enum_key(Stat, k, path): float(v) for k, v in value.items()}


def _load_contact(path: Path) -> ContactRules:
    data = _load_json(path)
    base_chance: dict[MissionType, ContactChance] = {}
    for key, entry in dict(data.get("base_chance", {})).items():
        if not isinstance(entry, dict):
            raise RulesError(f"{path}: base_chance entry must be object")
        base_chance[_enum_key(MissionType, key, path)] = ContactChance(
            base=int(entry.get("base", 50)),
            per_distance=float(entry.get("per_distance", 0.0)),
        )
    special_events: dict[MissionType, SpecialEventRule] = {}
    for key, entry in dict(data.get("special_events", {})).items():
        if not isinstance(entry, dict) or "event" not in entry:
            raise RulesError(f"{path}: special_events entry must name an event")
        special_events[_enum_key(MissionType, key, path)] = SpecialEventRule(
            event=_enum_key(SpecialEvent, entry["event"], path),
            chance=int(entry.get("chance", 0)),
        )
    min_chance = int(data.get("min_chance", 10))
    max_chance = int(data.get("max_chance", 95))
    if min_chance > max_chance:
        raise RulesError(f"{path}: min_chance exceeds max_chance")
    return ContactRules(
        base_chance=base_chance,
        default_base_chance=int(data.get("default_base_chance", 50)),
        operations_reduction_per_rating=int(data.get("operations_reduction_per_rating", 5)),
        min_chance=min_chance,
        max_chance=max_chance,
        special_events=special_events,
    )


def _load_outcome(path: Path) -> OutcomeRules:
    data = _load_json(path)
    eff = data.get("effectiveness", {})
    opp = data.get("opposition", {})
    exchange = data.get("exchange", {})

    thresholds: list[tuple[float, ResultBand]] = []
    for item in data.get("band_thresholds", []):
        if not isinstance(item, dict) or "above" not in item or "band" not in item:
            raise RulesError(f"{path}: band threshold must have 'above' and 'band'")
        thresholds.append((float(item["above"]), _band(item["band"], path)))
    if not thresholds:
        raise RulesError(f"{path}: missing 'band_thresholds'")
    # Evaluated highest ratio first.
    thresholds.sort(key=lambda pair: pair[0], reverse=True)

    return OutcomeRules(
        effectiveness=EffectivenessRules(
            skill_bonuses={str(k): float(v) for k, v in dict(eff.get("skill_bonuses", {})).items()},
            rear_gunner_factor=float(eff.get("rear_gunner_factor", 0.5)),
            stress_threshold=float(eff.get("stress_threshold", 20.0)),
            stress_divisor=float(eff.get("stress_divisor", 30.0)),
            sturdy_stress_factor=float(eff.get("sturdy_stress_factor", 0.25)),
            solo_two_seater_penalty=float(eff.get("solo_two_seater_penalty", 2.0)),
            training_bonus_per_rating=float(eff.get("training_bonus_per_rating", 0.5)),
            operations_bonus_per_rating=float(eff.get("operations_bonus_per_rating", 0.3)),
        ),
        opposition=OppositionRules(
            base=float(opp.get("base", 5.0)),
            per_distance=float(opp.get("per_distance", 0.2)),
            noise=int(opp.get("noise", 3)),
            event_multipliers={
                _enum_key(SpecialEvent, k, path): float(v)
                for k, v in dict(opp.get("event_multipliers", {})).items()
            },
        ),
        risk_ratio={
            _enum_key(RiskPosture, k, path): float(v) for k, v in dict(data.get("risk_ratio", {})).items()
        },
        band_thresholds=tuple(thresholds),
        floor_band=_band(data.get("floor_band", "disaster"), path),
        exchange=ExchangeRules(
            severe_ratio=float(exchange.get("severe_ratio", 1.0)),
            severe_steps=int(exchange.get("severe_steps", 2)),
            severe_ceiling=_band(exchange.get("severe_ceiling", "marginal_failure"), path),
            mild_ratio=float(exchange.get("mild_ratio", 3.0)),
            mild_steps=int(exchange.get("mild_steps", 1)),
            mild_ceiling=_band(exchange.get("mild_ceiling", "stalemate"), path),
        ),
    )


def _load_consequences(path: Path) -> ConsequenceRules:
    data = _load_json(path)
    costs = data.get("costs", {})
    durations: dict[MissionType, MissionDuration] = {}
    for key, entry in dict(data.get("mission_duration", {})).items():
        if not isinstance(entry, dict):
            raise RulesError(f"{path}: mission_duration entry must be object")
        durations[_enum_key(MissionType, key, path)] = MissionDuration(
            base=int(entry.get("base", 60)),
            per_distance=int(entry.get("per_distance", 10)),
        )
    return ConsequenceRules(
        costs=CostRules(
            fuel_per_distance=int(costs.get("fuel_per_distance", 5)),
            ammo_per_unit=int(costs.get("ammo_per_unit", 5)),
            ammo_multiplier={
                _enum_key(MissionType, k, path): int(v)
                for k, v in dict(costs.get("ammo_multiplier", {})).items()
            },
            min_fuel=int(costs.get("min_fuel", 10)),
            min_ammo=int(costs.get("min_ammo", 5)),
            max_efficiency=float(costs.get("max_efficiency", 0.9)),
        ),
        loss_chance={_band(k, path): int(v) for k, v in dict(data.get("loss_chance", {})).items()},
        default_loss_chance=int(data.get("default_loss_chance", 20)),
        secondary_crew_factor=float(data.get("secondary_crew_factor", 0.8)),
        damage_range=_pair(data.get("damage_range", [10, 39]), path, "damage_range"),
        wound_recovery_days=_pair(data.get("wound_recovery_days", [3, 7]), path, "wound_recovery_days"),
        kill_ranges={
            _band(k, path): _pair(v, path, "kill_ranges") for k, v in dict(data.get("kill_ranges", {})).items()
        },
        kill_gains=_stat_map(data.get("kill_gains", {}), path),
        captain_merit_per_kill=int(data.get("captain_merit_per_kill", 5)),
        mission_duration=durations,
    )


def _load_traits(items: Any, path: Path, *, positive: bool) -> tuple[PilotTrait, ...]:
    if not isinstance(items, list):
        raise RulesError(f"{path}: trait pool must be array")
    traits: list[PilotTrait] = []
    for item in items:
        if not isinstance(item, dict):
            raise RulesError(f"{path}: trait entry must be object")
        trait_id = item.get("id")
        if not isinstance(trait_id, str):
            raise RulesError(f"{path}: trait.id must be string")
        traits.append(
            PilotTrait(
                id=trait_id,
                name=str(item.get("name", trait_id)),
                description=str(item.get("description", "")),
                positive=positive,
                modifiers={_enum_key(Stat, k, path): int(v) for k, v in dict(item.get("modifiers", {})).items()},
            )
        )
    return tuple(traits)


def _load_progression(path: Path) -> ProgressionRules:
    data = _load_json(path)
    fatigue = data.get("fatigue", {})
    orders = data.get("orders", {})
    traits = data.get("traits", {})
    discovery = data.get("discovery", {})

    return ProgressionRules(
        participation=_stat_map(data.get("participation", {}), path),
        fatigue=FatigueRules(
            base=float(fatigue.get("base", 10.0)),
            per_distance=float(fatigue.get("per_distance", 1.5)),
            max=float(fatigue.get("max", 100.0)),
            risk_multiplier={
                _enum_key(RiskPosture, k, path): float(v)
                for k, v in dict(fatigue.get("risk_multiplier", {})).items()
            },
        ),
        mission_bonuses={
            _enum_key(MissionType, k, path): _stat_map(v, path)
            for k, v in dict(data.get("mission_bonuses", {})).items()
        },
        survival_bonus=_stat_map(data.get("survival_bonus", {}), path),
        orders=OrderRules(
            gains=_stat_map(orders.get("gains", {}), path),
            merit=int(orders.get("merit", 5)),
            captain_merit=int(orders.get("captain_merit", 2)),
        ),
        outcome_merit={_band(k, path): int(v) for k, v in dict(data.get("outcome_merit", {})).items()},
        traits=TraitRules(
            base_chance=int(traits.get("base_chance", 5)),
            fatigue_threshold=float(traits.get("fatigue_threshold", 80.0)),
            fatigue_bonus=int(traits.get("fatigue_bonus", 10)),
            disaster_bonus=int(traits.get("disaster_bonus", 15)),
            decisive_bonus=int(traits.get("decisive_bonus", 10)),
            hospital_days=_pair(traits.get("hospital_days", [7, 14]), path, "hospital_days"),
            positive=_load_traits(traits.get("positive", []), path, positive=True),
            negative=_load_traits(traits.get("negative", []), path, positive=False),
        ),
        discovery=DiscoveryRules(
            path_radius=float(discovery.get("path_radius", 15.0)),
            base_chance=float(discovery.get("base_chance", 5.0)),
            distance_divisor=float(discovery.get("distance_divisor", 5.0)),
            recon_divisor=float(discovery.get("recon_divisor", 10.0)),
        ),
    )


def _load_narratives(path: Path) -> dict[str, tuple[str, ...]]:
    data = _load_json(path)
    narratives: dict[str, tuple[str, ...]] = {}
    for category in ("disaster", "kill", "contact", "quiet"):
        templates = data.get(category)
        if not isinstance(templates, list) or not templates:
            raise RulesError(f"{path}: '{category}' must be a non-empty array")
        narratives[category] = tuple(str(t) for t in templates)
    return narratives
