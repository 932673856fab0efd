# app/services/feasibility.py
# -----------------------------------------------------------------------------
# 거리 -> 이동 시간 -> 가능성 등급
#   minutes = round(distance / speed * 60 + overhead)
#   < 10 Highly Feasible / 10..15 Borderline / > 15 Unlikely
# -----------------------------------------------------------------------------
from __future__ import annotations

import math

from app.core.config import settings
from app.schemas.estimate import Feasibility


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def travel_time_minutes(
    distance_km: float,
    speed_kmph: float | None = None,
    overhead_min: float | None = None,
) -> int:
    """
    라이더 평균 속도와 고정 오버헤드(포장/주차)로 총 소요 시간(분)을 계산.
    음수/NaN/inf 거리는 ValueError.
    """
    if not isinstance(distance_km, (int, float)) or isinstance(distance_km, bool):
        raise ValueError(f"distance must be a number, got {distance_km!r}")
    if not math.isfinite(distance_km) or distance_km < 0:
        raise ValueError(f"distance must be finite and >= 0, got {distance_km!r}")

    speed = speed_kmph if speed_kmph is not None else settings.AVG_RIDER_SPEED_KMPH
    overhead = overhead_min if overhead_min is not None else settings.PACKING_TIME_MIN
    if speed <= 0:
        raise ValueError("speed must be > 0")

    return _round_half_up(distance_km * 60 / speed + overhead)


def calculate_feasibility(minutes: int) -> Feasibility:
    if minutes < 10:
        return "Highly Feasible"
    if minutes <= 15:
        return "Borderline"
    return "Unlikely"


def calculate_time_and_feasibility(
    distance_km: float, **kwargs
) -> tuple[int, Feasibility]:
    total = travel_time_minutes(distance_km, **kwargs)
    return total, calculate_feasibility(total)
