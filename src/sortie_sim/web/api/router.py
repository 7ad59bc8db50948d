from __future__ import annotations

import logging

from fastapi import APIRouter

from sortie_sim.rules.ruleset import Ruleset
from sortie_sim.sim.resolver import SortieStateError, resolve_sortie
from sortie_sim.sim.rng import sortie_rng
from sortie_sim.web.api import mappers, schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/rules", response_model=schemas.RulesSummary)
async def get_rules():
    return mappers.build_rules_summary(Ruleset.default())


@router.post("/sorties/resolve", response_model=schemas.ApiResponse)
async def resolve(payload: schemas.ResolveSortieRequest):
    try:
        context = mappers.build_context(payload)
        report = resolve_sortie(
            context.sortie,
            context.base,
            rng=sortie_rng(payload.seed, day=payload.day, sortie_seq=payload.sortie_seq),
            directive=context.directive,
            roster=context.roster,
            captain=context.captain,
            sector_map=context.sector_map,
            current_date=context.current_date,
        )
    except (ValueError, SortieStateError) as exc:
        logger.warning("Sortie request rejected: %s", exc)
        return schemas.ApiResponse(ok=False, message=str(exc), message_kind="error")

    kind = "error" if report.aborted else "info"
    message = report.log_lines[-1] if report.log_lines else None
    return schemas.ApiResponse(
        ok=not report.aborted,
        message=message,
        message_kind=kind,
        result=mappers.build_result(report, context),
    )
