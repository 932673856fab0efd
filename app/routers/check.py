# app/routers/check.py
# -----------------------------------------------------------------------------
# /api/check           : 탐색 + 분석 한 번에
# /api/check/discover  : 플랫폼별 추정치만
# /api/check/analysis  : 추정치로 요약/리스크 생성 (화면에서 별도 로딩)
# -----------------------------------------------------------------------------
from fastapi import APIRouter, HTTPException
from loguru import logger

from app.schemas.estimate import (
    AnalysisRequest,
    AnalysisResponse,
    CheckRequest,
    CheckResult,
    SimulationResult,
)
from app.services.analysis import analyze_feasibility
from app.services.reality_check import run_discovery, run_reality_check
from app.services.view_state import GENERIC_ERROR

router = APIRouter(prefix="/api/check", tags=["check"])


@router.post("", response_model=CheckResult, response_model_by_alias=True)
async def check(req: CheckRequest):
    try:
        simulation, analysis = await run_reality_check(req.query, req.label)
        return CheckResult(simulation=simulation, analysis=analysis)
    except Exception:
        logger.exception(f"[Check] 처리 실패: {req.query!r}")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.post("/discover", response_model=SimulationResult, response_model_by_alias=True)
async def discover(req: CheckRequest):
    try:
        return await run_discovery(req.query, req.label)
    except Exception:
        logger.exception(f"[Check] 탐색 실패: {req.query!r}")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.post("/analysis", response_model=AnalysisResponse, response_model_by_alias=True)
async def analysis(req: AnalysisRequest):
    return await analyze_feasibility(req.location, req.estimates)
