from __future__ import annotations

import math
import random
from datetime import date
from typing import Sequence

from sortie_sim.domain.events import MissionLog
from sortie_sim.domain.services import SectorMapService
from sortie_sim.domain.sortie_models import Sortie
from sortie_sim.domain.types import Vec2
from sortie_sim.domain.world import MapLocation
from sortie_sim.rules.ruleset import DiscoveryRules

PHASE = "discovery"
MIN_WAYPOINTS = 2


def point_segment_distance(point: Vec2, start: Vec2, end: Vec2) -> float:
    px, py = point
    ax, ay = start
    bx, by = end
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(px - ax, py - ay)
    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def path_distance(point: Vec2, waypoints: Sequence[Vec2]) -> float:
    return min(
        point_segment_distance(point, waypoints[i], waypoints[i + 1]) for i in range(len(waypoints) - 1)
    )


def discovery_candidates(
    locations: Sequence[MapLocation], waypoints: Sequence[Vec2], radius: float
) -> list[MapLocation]:
    if len(waypoints) < MIN_WAYPOINTS:
        return []
    return [
        loc
        for loc in locations
        if not loc.discovered and path_distance(loc.coordinates, waypoints) < radius
    ]


def recon_score(sortie: Sortie) -> float:
    return sum(a.combined_recon_rating() for a in sortie.assignments)


def discovery_chance(sortie: Sortie, rules: DiscoveryRules) -> float:
    return rules.base_chance + sortie.target_distance / rules.distance_divisor + recon_score(sortie) / rules.recon_divisor


def resolve_discovery(
    sortie: Sortie,
    sector_map: SectorMapService | None,
    rng: random.Random,
    rules: DiscoveryRules,
    log: MissionLog,
    current_date: date | None = None,
) -> MapLocation | None:
    if sector_map is None or len(sortie.waypoints) < MIN_WAYPOINTS:
        return None
    # Nothing is reported if no aircraft made it home.
    if all(a.aircraft is not None and a.aircraft.is_lost for a in sortie.assignments):
        return None

    candidates = discovery_candidates(sector_map.locations, sortie.waypoints, rules.path_radius)
    if not candidates:
        return None

    if rng.randrange(100) >= discovery_chance(sortie, rules):
        return None

    found = candidates[rng.randrange(len(candidates))]
    sector_map.mark_discovered(found, current_date)
    log.add(PHASE, f"RECON REPORT: Pilots spotted and confirmed the location of {found.name} during the flight.")
    return found
