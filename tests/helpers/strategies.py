from __future__ import annotations

from hypothesis import strategies as st

from sortie_sim.domain.types import ContactIntensity, MissionType, ResultBand, RiskPosture, SpecialEvent, Stat
from sortie_sim.domain.world import BaseResources


def band_strategy() -> st.SearchStrategy[ResultBand]:
    return st.sampled_from(list(ResultBand))


def mission_type_strategy() -> st.SearchStrategy[MissionType]:
    return st.sampled_from(list(MissionType))


def risk_strategy() -> st.SearchStrategy[RiskPosture]:
    return st.sampled_from(list(RiskPosture))


def intensity_strategy() -> st.SearchStrategy[ContactIntensity]:
    return st.sampled_from(list(ContactIntensity))


def special_event_strategy() -> st.SearchStrategy[SpecialEvent | None]:
    return st.one_of(st.none(), st.sampled_from(list(SpecialEvent)))


def stats_strategy(min_val: int = 0, max_val: int = 100) -> st.SearchStrategy[dict[Stat, int]]:
    return st.fixed_dictionaries({stat: st.integers(min_value=min_val, max_value=max_val) for stat in Stat})


def pending_gains_strategy() -> st.SearchStrategy[dict[Stat, float]]:
    return st.dictionaries(
        st.sampled_from(list(Stat)),
        st.floats(min_value=-5.0, max_value=20.0, allow_nan=False, allow_infinity=False),
        max_size=len(Stat),
    )


def base_strategy(min_val: int = 0, max_val: int = 20000) -> st.SearchStrategy[BaseResources]:
    rating = st.integers(min_value=1, max_value=5)
    return st.builds(
        BaseResources,
        fuel=st.integers(min_value=min_val, max_value=max_val),
        ammo=st.integers(min_value=min_val, max_value=max_val // 10),
        runway_rating=rating,
        maintenance_rating=rating,
        operations_rating=rating,
        training_rating=rating,
        lodging_rating=rating,
        medical_rating=rating,
    )
