# app/services/reality_check.py
# -----------------------------------------------------------------------------
# 검색 1회 = 매장 탐색 -> (탐색 결과로) 분석, 순차 실행
# -----------------------------------------------------------------------------
from __future__ import annotations

import re
from typing import Optional, Tuple

from loguru import logger

from app.schemas.estimate import AnalysisResponse, Coordinates, SimulationResult
from app.services.analysis import analyze_feasibility
from app.services.discovery import discover_stores
from app.services.gemini import GeminiClient

_COORDS_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


def parse_coordinates(query: str) -> Optional[Coordinates]:
    """브라우저 위치("lat, lng") 문자열이면 좌표로 변환"""
    m = _COORDS_RE.match(query or "")
    if not m:
        return None
    lat, lng = float(m.group(1)), float(m.group(2))
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None
    return Coordinates(lat=lat, lng=lng)


async def run_discovery(
    location_query: str,
    label: Optional[str] = None,
    client: Optional[GeminiClient] = None,
) -> SimulationResult:
    estimates = await discover_stores(location_query, client=client)
    result = SimulationResult(
        user_location=parse_coordinates(location_query),
        address_label=label or location_query,
        estimates=estimates,
    )
    logger.info(
        f"[Check] {result.address_label!r}: "
        f"{len(result.found_estimates)}/{len(estimates)} found"
    )
    return result


async def run_reality_check(
    location_query: str,
    label: Optional[str] = None,
    client: Optional[GeminiClient] = None,
) -> Tuple[SimulationResult, AnalysisResponse]:
    simulation = await run_discovery(location_query, label, client=client)
    analysis = await analyze_feasibility(
        simulation.address_label, simulation.estimates, client=client
    )
    return simulation, analysis
