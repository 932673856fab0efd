# app/services/gemini.py
# -----------------------------------------------------------------------------
# Gemini generateContent REST 호출 (httpx)
# - 첫 번째 후보의 텍스트 + grounding 인용(title/uri)만 추려서 반환
# - 재시도 없음. 실패는 예외로 올리고 상위 서비스가 폴백 처리
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from app.core.config import settings

GOOGLE_MAPS_TOOL: Dict[str, Any] = {"googleMaps": {}}


class GeminiError(RuntimeError):
    """Gemini 응답에 쓸 수 있는 후보가 없을 때"""


@dataclass(frozen=True)
class Citation:
    title: str
    uri: str


@dataclass(frozen=True)
class GeminiReply:
    text: str = ""
    grounding_chunks: List[Citation] = field(default_factory=list)


def _extract_text(candidate: Dict[str, Any]) -> str:
    parts = (candidate.get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict))


def _extract_citations(candidate: Dict[str, Any]) -> List[Citation]:
    meta = candidate.get("groundingMetadata") or {}
    out: List[Citation] = []
    for chunk in meta.get("groundingChunks") or []:
        if not isinstance(chunk, dict):
            continue
        # Maps grounding은 보통 'maps', 검색은 'web'
        data = chunk.get("maps") or chunk.get("web") or {}
        uri = data.get("uri")
        if uri:
            out.append(Citation(title=data.get("title") or "", uri=uri))
    return out


def parse_reply(payload: Dict[str, Any]) -> GeminiReply:
    candidates = payload.get("candidates") or []
    if not candidates:
        reason = (payload.get("promptFeedback") or {}).get("blockReason")
        raise GeminiError(f"no candidates in response (blockReason={reason})")
    first = candidates[0]
    return GeminiReply(text=_extract_text(first), grounding_chunks=_extract_citations(first))


class GeminiClient:
    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, **overrides) -> "GeminiClient":
        kwargs = dict(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            base_url=settings.GEMINI_API_URL,
            timeout=settings.HTTP_TIMEOUT_S,
        )
        kwargs.update(overrides)
        return cls(**kwargs)

    def _auth_headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY가 설정되어 있지 않습니다.")
        return {"x-goog-api-key": self.api_key}

    async def generate(
        self,
        prompt: str,
        *,
        tools: Optional[List[Dict[str, Any]]] = None,
        response_mime_type: Optional[str] = None,
    ) -> GeminiReply:
        headers = self._auth_headers()
        body: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if tools:
            body["tools"] = tools
        if response_mime_type:
            # googleMaps 도구와 responseMimeType은 함께 쓸 수 없음
            body["generationConfig"] = {"responseMimeType": response_mime_type}

        url = f"{self.base_url}/models/{self.model}:generateContent"
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout), transport=self.transport
        ) as client:
            r = await client.post(url, json=body, headers=headers)
            r.raise_for_status()
            payload = r.json()

        reply = parse_reply(payload)
        logger.debug(
            f"[Gemini] {self.model} text={len(reply.text)}자 "
            f"citations={len(reply.grounding_chunks)}"
        )
        return reply
