from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sortie_sim.domain.aircraft import AircraftType, AircraftUnit
from sortie_sim.domain.crew import CrewMember, default_stats
from sortie_sim.domain.reports import SortieReport
from sortie_sim.domain.services import Captain, Roster, SectorMap
from sortie_sim.domain.sortie_models import FlightAssignment, Sortie
from sortie_sim.domain.types import CommandPriority, MissionType, RiskPosture, Stat
from sortie_sim.domain.world import BaseResources, DailyDirective, MapLocation
from sortie_sim.rules.ruleset import Ruleset
from sortie_sim.web.api import schemas


@dataclass()
class SortieContext:
    """Domain objects built from one resolve request."""

    base: BaseResources
    aircraft: dict[str, AircraftUnit]
    roster: Roster
    crew: list[CrewMember]
    sortie: Sortie
    directive: DailyDirective | None
    captain: Captain | None
    sector_map: SectorMap
    current_date: date | None


def _parse_enum(enum_cls, value: str, label: str):
    try:
        return enum_cls(value.lower())
    except ValueError as exc:
        raise ValueError(f"Unknown {label}: {value}") from exc


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value}") from exc


def _stats(raw: dict[str, int]) -> dict[Stat, int]:
    stats = default_stats()
    for key, value in raw.items():
        try:
            stat = Stat(key.upper())
        except ValueError as exc:
            raise ValueError(f"Unknown stat: {key}") from exc
        stats[stat] = max(0, min(100, int(value)))
    return stats


def _lookup(index: dict, key: str | None, label: str):
    if key is None:
        return None
    try:
        return index[key]
    except KeyError as exc:
        raise ValueError(f"Unknown {label}: {key}") from exc


def build_context(payload: schemas.ResolveSortieRequest) -> SortieContext:
    base = BaseResources(**payload.base.model_dump())

    types = {
        item.id: AircraftType(**item.model_dump())
        for item in payload.aircraft_types
    }
    aircraft: dict[str, AircraftUnit] = {}
    for item in payload.aircraft:
        aircraft[item.tail_number] = AircraftUnit(
            aircraft_type=_lookup(types, item.type_id, "aircraft type"),
            tail_number=item.tail_number,
            condition=item.condition,
            airframe_stress=item.airframe_stress,
            hours_flown=item.hours_flown,
            missions_survived=item.missions_survived,
        )

    crew = [
        CrewMember(
            id=item.id,
            name=item.name,
            stats=_stats(item.stats),
            fatigue=item.fatigue,
            merit=item.merit,
            missions_flown=item.missions_flown,
            aerial_victories=item.aerial_victories,
        )
        for item in payload.crew
    ]
    roster = Roster.of(crew)

    sortie = Sortie(
        mission_type=_parse_enum(MissionType, payload.sortie.mission_type, "mission type"),
        target_distance=payload.sortie.target_distance,
        risk=_parse_enum(RiskPosture, payload.sortie.risk, "risk posture"),
        waypoints=[(p.x, p.y) for p in payload.sortie.waypoints],
    )
    if not payload.sortie.assignments:
        raise ValueError("Sortie needs at least one flight assignment")
    for item in payload.sortie.assignments:
        sortie.add_assignment(
            FlightAssignment(
                aircraft=_lookup(aircraft, item.aircraft, "aircraft"),
                pilot=_lookup(roster.members, item.pilot, "crew member"),
                gunner=_lookup(roster.members, item.gunner, "crew member"),
                observer=_lookup(roster.members, item.observer, "crew member"),
            )
        )

    directive = None
    if payload.directive is not None:
        directive = DailyDirective.for_priority(
            _parse_enum(CommandPriority, payload.directive, "command priority")
        )

    captain = None
    if payload.captain is not None:
        captain = Captain(**payload.captain.model_dump())

    sector_map = SectorMap.of(
        MapLocation(
            id=item.id,
            name=item.name,
            coordinates=(item.position.x, item.position.y),
            kind=item.kind,
            discovered=item.discovered,
        )
        for item in payload.locations
    )

    return SortieContext(
        base=base,
        aircraft=aircraft,
        roster=roster,
        crew=crew,
        sortie=sortie,
        directive=directive,
        captain=captain,
        sector_map=sector_map,
        current_date=_parse_date(payload.date),
    )


def build_report(report: SortieReport, sortie: Sortie) -> schemas.SortieReport:
    return schemas.SortieReport(
        status=report.status.value,
        result_band=report.result_band.label if report.result_band is not None else None,
        intensity=int(report.intensity) if report.intensity is not None else None,
        special_event=report.special_event.value if report.special_event is not None else None,
        fuel_consumed=report.fuel_consumed,
        ammo_consumed=report.ammo_consumed,
        aircraft_lost=report.aircraft_lost,
        crew_wounded=report.crew_wounded,
        crew_killed=report.crew_killed,
        enemy_kills=report.enemy_kills,
        friendly_score=report.friendly_score,
        opposing_score=report.opposing_score,
        followed_orders=sortie.followed_orders,
        order_bonus=sortie.order_bonus,
        order_message=sortie.order_message,
        log=[schemas.LogEntry(phase=entry.phase, message=entry.message) for entry in report.log],
        top_factors=[
            schemas.TopFactor(name=f.name, value=f.value, delta=f.delta, why=f.why) for f in report.top_factors
        ],
        pilots=[
            schemas.PilotProgress(
                crew_id=p.crew_id,
                name=p.name,
                fatigue_gain=p.fatigue_gain,
                merit_gain=p.merit_gain,
                pending_gains={stat.value: amount for stat, amount in p.pending_gains.items()},
                applied_gains={stat.value: amount for stat, amount in p.applied_gains.items()},
                new_trait=p.new_trait,
                hospitalized=p.hospitalized,
            )
            for p in report.pilots
        ],
        discovered=list(report.discovered),
    )


def build_result(report: SortieReport, context: SortieContext) -> schemas.ResolveSortieResult:
    return schemas.ResolveSortieResult(
        report=build_report(report, context.sortie),
        base=schemas.BaseState(name=context.base.name, fuel=context.base.fuel, ammo=context.base.ammo),
        aircraft=[
            schemas.AircraftState(
                tail_number=unit.tail_number,
                name=unit.aircraft_type.name,
                status=unit.status.value,
                condition=unit.condition,
                hours_flown=unit.hours_flown,
                missions_survived=unit.missions_survived,
                kills=unit.kills,
            )
            for unit in context.aircraft.values()
        ],
        crew=[
            schemas.CrewState(
                id=member.id,
                name=member.name,
                status=member.status.value,
                rank=member.rank,
                primary_role=member.primary_role,
                stats={stat.value: value for stat, value in member.stats.items()},
                fatigue=member.fatigue,
                merit=member.merit,
                missions_flown=member.missions_flown,
                aerial_victories=member.aerial_victories,
                recovery_days=member.recovery_days,
                traits=[t.name for t in (*member.positive_traits, *member.negative_traits)],
            )
            for member in context.crew
        ],
        captain=(
            schemas.CaptainState(name=context.captain.name, rank=context.captain.rank, merit=context.captain.merit)
            if context.captain is not None
            else None
        ),
        locations=[
            schemas.LocationState(
                id=loc.id,
                name=loc.name,
                discovered=loc.discovered,
                discovered_on=loc.discovered_on.isoformat() if loc.discovered_on is not None else None,
            )
            for loc in context.sector_map.locations
        ],
    )


def build_rules_summary(rules: Ruleset) -> schemas.RulesSummary:
    return schemas.RulesSummary(
        band_thresholds={band.label: threshold for threshold, band in rules.outcome.band_thresholds},
        loss_chance={band.label: chance for band, chance in rules.consequences.loss_chance.items()},
        risk_ratio={risk.value: factor for risk, factor in rules.outcome.risk_ratio.items()},
        contact_base={mission.value: entry.base for mission, entry in rules.contact.base_chance.items()},
    )
