# app/schemas/estimate.py
# -----------------------------------------------------------------------------
# 배달 가능성 추정 스키마
# - 모든 모델은 frozen (생성 후 불변)
# - JSON 입출력은 camelCase 별칭 사용 (storeName, distanceKm ...)
# -----------------------------------------------------------------------------
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.core.platforms import PlatformName

Feasibility = Literal["Highly Feasible", "Borderline", "Unlikely", "Unknown"]
EstimateSource = Literal["Live Search", "Not Found"]


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )


class Coordinates(_Frozen):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class DeliveryEstimate(_Frozen):
    platform: PlatformName
    store_name: str
    store_address: str
    distance_km: float = Field(ge=0)
    estimated_travel_time_min: int = Field(ge=0)
    feasibility: Feasibility
    color: str
    source: EstimateSource
    evidence_link: Optional[str] = None

    @model_validator(mode="after")
    def _tier_follows_time(self):
        # 등급은 이동 시간에서만 결정됨 (직접 지정 불가)
        from app.services.feasibility import calculate_feasibility

        if self.source == "Not Found":
            if self.feasibility != "Unknown" or self.estimated_travel_time_min != 0:
                raise ValueError("Not Found estimate must be Unknown with 0 minutes")
        elif self.feasibility != calculate_feasibility(self.estimated_travel_time_min):
            raise ValueError(
                f"feasibility {self.feasibility!r} does not match "
                f"{self.estimated_travel_time_min} min"
            )
        return self

    @property
    def found(self) -> bool:
        return self.source != "Not Found"


class SimulationResult(_Frozen):
    user_location: Optional[Coordinates] = None
    address_label: str
    estimates: List[DeliveryEstimate] = []
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def found_estimates(self) -> List[DeliveryEstimate]:
        return [e for e in self.estimates if e.found]


class AnalysisResponse(_Frozen):
    summary: str
    risk_factors: List[str] = []


# 요청/응답 바디
class CheckRequest(_Frozen):
    query: str = Field(min_length=1)
    label: Optional[str] = None


class AnalysisRequest(_Frozen):
    location: str
    estimates: List[DeliveryEstimate] = []


class CheckResult(_Frozen):
    simulation: SimulationResult
    analysis: AnalysisResponse
