from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_by_name=True)


class Position(CamelModel):
    x: float
    y: float


# Requests


class BasePayload(CamelModel):
    name: str = "Home Airfield"
    fuel: int = Field(..., ge=0)
    ammo: int = Field(..., ge=0)
    runway_rating: int = Field(1, alias="runwayRating", ge=1, le=5)
    maintenance_rating: int = Field(1, alias="maintenanceRating", ge=1, le=5)
    operations_rating: int = Field(1, alias="operationsRating", ge=1, le=5)
    training_rating: int = Field(1, alias="trainingRating", ge=1, le=5)
    lodging_rating: int = Field(1, alias="lodgingRating", ge=1, le=5)
    medical_rating: int = Field(1, alias="medicalRating", ge=1, le=5)


class AircraftTypePayload(CamelModel):
    id: str
    name: str
    nation: str = ""
    speed: int = Field(5, ge=0, le=10)
    climb: int = Field(5, ge=0, le=10)
    turn: int = Field(5, ge=0, le=10)
    stability: int = Field(5, ge=0, le=10)
    dive_safety: int = Field(5, alias="diveSafety", ge=0, le=10)
    ceiling: int = Field(5, ge=0, le=10)
    distance: int = Field(5, ge=0, le=10)
    fighter_role: int = Field(0, alias="fighterRole", ge=0, le=10)
    bomber_role: int = Field(0, alias="bomberRole", ge=0, le=10)
    recon_role: int = Field(0, alias="reconRole", ge=0, le=10)
    firepower: int = Field(5, ge=0, le=10)
    accuracy: int = Field(5, ge=0, le=10)
    ammo: int = Field(5, ge=0, le=10)
    crew_seats: int = Field(1, alias="crewSeats", ge=1, le=3)
    firepower_rear: int = Field(0, alias="firepowerRear", ge=0, le=10)
    airframe_strength: int = Field(5, alias="airframeStrength", ge=0, le=10)
    engine_durability: int = Field(5, alias="engineDurability", ge=0, le=10)
    pilot_protection: int = Field(5, alias="pilotProtection", ge=0, le=10)
    fuel_vulnerability: int = Field(5, alias="fuelVulnerability", ge=0, le=10)
    reliability: int = Field(5, ge=0, le=10)
    runway_requirement: int = Field(1, alias="runwayRequirement", ge=1, le=5)
    fuel_consumption: int = Field(5, alias="fuelConsumption", ge=0, le=10)


class AircraftPayload(CamelModel):
    tail_number: str = Field(..., alias="tailNumber")
    type_id: str = Field(..., alias="typeId")
    condition: int = Field(100, ge=0, le=100)
    airframe_stress: float = Field(0.0, alias="airframeStress", ge=0)
    hours_flown: int = Field(0, alias="hoursFlown", ge=0)
    missions_survived: int = Field(0, alias="missionsSurvived", ge=0)


class CrewPayload(CamelModel):
    id: str
    name: str
    stats: Dict[str, int] = Field(default_factory=dict)
    fatigue: float = Field(0.0, ge=0, le=100)
    merit: int = 0
    missions_flown: int = Field(0, alias="missionsFlown", ge=0)
    aerial_victories: int = Field(0, alias="aerialVictories", ge=0)


class AssignmentPayload(CamelModel):
    aircraft: str
    pilot: str
    gunner: Optional[str] = None
    observer: Optional[str] = None


class SortiePayload(CamelModel):
    mission_type: str = Field(..., alias="missionType")
    target_distance: int = Field(..., alias="targetDistance")
    risk: str = "standard"
    assignments: List[AssignmentPayload]
    waypoints: List[Position] = Field(default_factory=list)


class LocationPayload(CamelModel):
    id: str
    name: str
    position: Position
    kind: str = "unknown"
    discovered: bool = False


class CaptainPayload(CamelModel):
    name: str = "James Whitmore"
    rank: str = "Captain"
    merit: int = 0


class ResolveSortieRequest(CamelModel):
    seed: int = 1
    day: int = Field(0, ge=0)
    sortie_seq: int = Field(0, alias="sortieSeq", ge=0)
    date: Optional[str] = None
    base: BasePayload
    aircraft_types: List[AircraftTypePayload] = Field(..., alias="aircraftTypes")
    aircraft: List[AircraftPayload]
    crew: List[CrewPayload]
    sortie: SortiePayload
    directive: Optional[str] = None
    captain: Optional[CaptainPayload] = None
    locations: List[LocationPayload] = Field(default_factory=list)


# Responses


class LogEntry(CamelModel):
    phase: str
    message: str


class TopFactor(CamelModel):
    name: str
    value: float
    delta: str
    why: str


class PilotProgress(CamelModel):
    crew_id: str = Field(..., alias="crewId")
    name: str
    fatigue_gain: float = Field(..., alias="fatigueGain")
    merit_gain: int = Field(..., alias="meritGain")
    pending_gains: Dict[str, float] = Field(..., alias="pendingGains")
    applied_gains: Dict[str, int] = Field(..., alias="appliedGains")
    new_trait: Optional[str] = Field(None, alias="newTrait")
    hospitalized: bool = False


class SortieReport(CamelModel):
    status: str
    result_band: Optional[str] = Field(None, alias="resultBand")
    intensity: Optional[int] = None
    special_event: Optional[str] = Field(None, alias="specialEvent")
    fuel_consumed: int = Field(..., alias="fuelConsumed")
    ammo_consumed: int = Field(..., alias="ammoConsumed")
    aircraft_lost: int = Field(..., alias="aircraftLost")
    crew_wounded: int = Field(..., alias="crewWounded")
    crew_killed: int = Field(..., alias="crewKilled")
    enemy_kills: int = Field(..., alias="enemyKills")
    friendly_score: Optional[float] = Field(None, alias="friendlyScore")
    opposing_score: Optional[float] = Field(None, alias="opposingScore")
    followed_orders: bool = Field(..., alias="followedOrders")
    order_bonus: int = Field(..., alias="orderBonus")
    order_message: str = Field("", alias="orderMessage")
    log: List[LogEntry]
    top_factors: List[TopFactor] = Field(default_factory=list, alias="topFactors")
    pilots: List[PilotProgress] = Field(default_factory=list)
    discovered: List[str] = Field(default_factory=list)


class BaseState(CamelModel):
    name: str
    fuel: int
    ammo: int


class AircraftState(CamelModel):
    tail_number: str = Field(..., alias="tailNumber")
    name: str
    status: str
    condition: int
    hours_flown: int = Field(..., alias="hoursFlown")
    missions_survived: int = Field(..., alias="missionsSurvived")
    kills: int


class CrewState(CamelModel):
    id: str
    name: str
    status: str
    rank: str
    primary_role: str = Field(..., alias="primaryRole")
    stats: Dict[str, int]
    fatigue: float
    merit: int
    missions_flown: int = Field(..., alias="missionsFlown")
    aerial_victories: int = Field(..., alias="aerialVictories")
    recovery_days: int = Field(..., alias="recoveryDays")
    traits: List[str] = Field(default_factory=list)


class CaptainState(CamelModel):
    name: str
    rank: str
    merit: int


class LocationState(CamelModel):
    id: str
    name: str
    discovered: bool
    discovered_on: Optional[str] = Field(None, alias="discoveredOn")


class ResolveSortieResult(CamelModel):
    report: SortieReport
    base: BaseState
    aircraft: List[AircraftState]
    crew: List[CrewState]
    captain: Optional[CaptainState] = None
    locations: List[LocationState] = Field(default_factory=list)


class ApiResponse(CamelModel):
    ok: bool
    message: Optional[str] = None
    message_kind: Optional[str] = Field(None, alias="messageKind")
    result: Optional[ResolveSortieResult] = None


class RulesSummary(CamelModel):
    band_thresholds: Dict[str, float] = Field(..., alias="bandThresholds")
    loss_chance: Dict[str, int] = Field(..., alias="lossChance")
    risk_ratio: Dict[str, float] = Field(..., alias="riskRatio")
    contact_base: Dict[str, int] = Field(..., alias="contactBase")
