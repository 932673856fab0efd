# app/core/platforms.py
# -----------------------------------------------------------------------------
# 퀵커머스 플랫폼 고정 목록 (순서 = 화면/결과 순서)
# -----------------------------------------------------------------------------
from typing import Dict, Literal, Tuple

PlatformName = Literal["Zepto", "Blinkit", "Swiggy Instamart"]

PLATFORMS: Tuple[PlatformName, ...] = ("Zepto", "Blinkit", "Swiggy Instamart")

PLATFORM_COLORS: Dict[str, str] = {
    "Zepto": "#9333ea",  # purple
    "Blinkit": "#facc15",  # yellow
    "Swiggy Instamart": "#f97316",  # orange
}

# 인용 제목 매칭용 이름 (소문자)
PLATFORM_ALIASES: Dict[str, Tuple[str, ...]] = {
    "Zepto": ("zepto",),
    "Blinkit": ("blinkit",),
    "Swiggy Instamart": ("swiggy", "instamart"),
}

NOT_FOUND_COLOR = "#cbd5e1"  # grey

# 10분 배송 약속 기준선
PROMISE_MINUTES = 10
