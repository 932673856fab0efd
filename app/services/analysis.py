# app/services/analysis.py
# -----------------------------------------------------------------------------
# 탐색 결과에 대한 Gemini 요약 + 리스크 3개
# - 찾은 매장이 없으면 원격 호출 없이 고정 문구
# - 오류/파싱 실패는 "Analysis unavailable." 로 폴백
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import re
from typing import List, Optional

from loguru import logger

from app.schemas.estimate import AnalysisResponse, DeliveryEstimate
from app.services.gemini import GeminiClient

NO_STORES_ANALYSIS = AnalysisResponse(
    summary=(
        "Google Maps could not pinpoint specific dark stores listed publicly near "
        "this location. However, delivery might still be available from further hubs."
    ),
    risk_factors=["Hidden/Unlisted dark stores", "Potential long-distance routing"],
)

UNAVAILABLE_ANALYSIS = AnalysisResponse(summary="Analysis unavailable.", risk_factors=[])

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


def build_analysis_prompt(location: str, estimates: List[DeliveryEstimate]) -> str:
    data = json.dumps(
        [e.model_dump(mode="json", by_alias=True, exclude_none=True) for e in estimates],
        ensure_ascii=False,
    )
    return f"""
      Analyze these delivery logistics for a user at "{location}".
      Data: {data}

      Context: <10m is Highly Feasible, 10-15m Borderline, >15m Unlikely.

      Task:
      1. Summary (max 60 words): Is 10-min delivery realistic?
      2. Exactly 3 Risk Factors.

      Output JSON: {{ "summary": string, "riskFactors": string[] }}
    """


def parse_analysis(text: str) -> AnalysisResponse:
    cleaned = _FENCE_RE.sub("", (text or "").strip())
    return AnalysisResponse.model_validate_json(cleaned)


async def analyze_feasibility(
    location: str,
    estimates: List[DeliveryEstimate],
    client: Optional[GeminiClient] = None,
) -> AnalysisResponse:
    valid = [e for e in estimates if e.found]
    if not valid:
        return NO_STORES_ANALYSIS

    client = client or GeminiClient.from_settings()
    try:
        reply = await client.generate(
            build_analysis_prompt(location, valid),
            response_mime_type="application/json",
        )
        return parse_analysis(reply.text)
    except Exception as e:
        logger.error(f"[Analysis] 요약 생성 실패 ({location!r}): {e}")
        return UNAVAILABLE_ANALYSIS
