# app/services/discovery.py
# -----------------------------------------------------------------------------
# 플랫폼별 최근접 다크스토어 탐색 (Gemini + Google Maps grounding)
# - 응답은 산문 + JSON 배열 -> 첫 번째 [...] 구간만 관대하게 파싱
# - 플랫폼 고정 순서로 정확히 1개씩 추정치 생성 (없으면 placeholder)
# - 어떤 실패든 [] 반환 (재시도 없음)
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from app.core.platforms import (
    NOT_FOUND_COLOR,
    PLATFORM_ALIASES,
    PLATFORM_COLORS,
    PLATFORMS,
)
from app.schemas.estimate import DeliveryEstimate
from app.services.feasibility import calculate_time_and_feasibility
from app.services.gemini import GOOGLE_MAPS_TOOL, Citation, GeminiClient

_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)


def build_discovery_prompt(location_query: str) -> str:
    names = "\n".join(f"      {i}. {p}" for i, p in enumerate(PLATFORMS, start=1))
    return f"""
      You are a geospatial analyst.
      User Location: "{location_query}"

      Task: Find the nearest operating location for EACH of these Quick Commerce platforms relative to the User Location:
{names}

      Use Google Maps to find these specific business listings. Look for terms like "Zepto", "Blinkit Store", "Swiggy Instamart", "Instamart", or "Grocery Delivery Hub".

      For each platform:
      1. Identify the nearest location found on Maps.
      2. Calculate/Estimate the driving distance (in KM) from "{location_query}" to that store.

      Output strictly a valid JSON array string. Do not use Markdown code blocks.
      Schema:
      [
        {{
          "platform": "Zepto",
          "found": true,
          "storeName": "Name from Maps",
          "storeAddress": "Address from Maps",
          "distanceKm": 1.5
        }}
      ]

      If a platform is not found nearby, set "found": false and "distanceKm": 0.
    """


def parse_store_array(text: Optional[str]) -> List[Dict[str, Any]]:
    """
    응답 텍스트에서 첫 '[' ~ 마지막 ']' 구간을 JSON 배열로 파싱.
    코드펜스/설명문이 섞여 있어도 되며, 실패 시 [].
    """
    if not text:
        return []
    match = _ARRAY_RE.search(text)
    if not match:
        logger.warning("[Discovery] 응답에 JSON 배열이 없습니다.")
        return []
    try:
        data = json.loads(match.group(0))
    except ValueError as e:
        logger.error(f"[Discovery] JSON 파싱 실패: {e}")
        return []
    if not isinstance(data, list):
        return []
    return [d for d in data if isinstance(d, dict)]


def is_web_link(uri: Optional[str]) -> bool:
    return bool(uri) and uri.lower().startswith(("http://", "https://"))


def match_evidence(chunks: Iterable[Citation]) -> Dict[str, str]:
    """
    인용 제목(소문자)에 플랫폼 이름이 포함되면 해당 uri를 근거 링크로 연결.
    플랫폼당 처음 매칭된 인용을 사용.
    """
    evidence: Dict[str, str] = {}
    for chunk in chunks:
        if not is_web_link(chunk.uri):
            continue
        title = (chunk.title or "").lower()
        for platform in PLATFORMS:
            if platform in evidence:
                continue
            if any(alias in title for alias in PLATFORM_ALIASES[platform]):
                evidence[platform] = chunk.uri
    return evidence


def _valid_distance(value: Any) -> Optional[float]:
    # "1.5" 같은 숫자 문자열도 허용
    if isinstance(value, bool):
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _find_entry(raw: List[Dict[str, Any]], platform: str) -> Optional[Dict[str, Any]]:
    for d in raw:
        if str(d.get("platform", "")).strip() == platform and d.get("found") is True:
            return d
    return None


def placeholder_estimate(platform: str) -> DeliveryEstimate:
    return DeliveryEstimate(
        platform=platform,
        store_name="No listed hub found nearby",
        store_address="N/A",
        distance_km=0,
        estimated_travel_time_min=0,
        feasibility="Unknown",
        color=NOT_FOUND_COLOR,
        source="Not Found",
    )


def build_estimates(
    raw: List[Dict[str, Any]], evidence: Optional[Dict[str, str]] = None
) -> List[DeliveryEstimate]:
    evidence = evidence or {}
    estimates: List[DeliveryEstimate] = []
    for platform in PLATFORMS:
        entry = _find_entry(raw, platform)
        distance = _valid_distance(entry.get("distanceKm")) if entry else None
        if entry is None or distance is None:
            if entry is not None:
                logger.warning(
                    f"[Discovery] {platform} 거리값 무효: {entry.get('distanceKm')!r}"
                )
            estimates.append(placeholder_estimate(platform))
            continue

        total, feasibility = calculate_time_and_feasibility(distance)
        estimates.append(
            DeliveryEstimate(
                platform=platform,
                store_name=str(entry.get("storeName") or platform),
                store_address=str(entry.get("storeAddress") or "N/A"),
                distance_km=distance,
                estimated_travel_time_min=total,
                feasibility=feasibility,
                color=PLATFORM_COLORS[platform],
                source="Live Search",
                evidence_link=evidence.get(platform),
            )
        )
    return estimates


async def discover_stores(
    location_query: str, client: Optional[GeminiClient] = None
) -> List[DeliveryEstimate]:
    """
    위치 문자열 기준 플랫폼별 추정치 3개. 네트워크/파싱 등 모든 실패 시 [].
    """
    client = client or GeminiClient.from_settings()
    try:
        reply = await client.generate(
            build_discovery_prompt(location_query), tools=[GOOGLE_MAPS_TOOL]
        )
        raw = parse_store_array(reply.text or "[]")
        return build_estimates(raw, match_evidence(reply.grounding_chunks))
    except Exception as e:
        logger.error(f"[Discovery] Maps 탐색 실패 ({location_query!r}): {e}")
        return []
