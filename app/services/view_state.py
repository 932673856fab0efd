# app/services/view_state.py
# -----------------------------------------------------------------------------
# 화면 상태 머신 (불변 스냅샷 교체)
#   Idle -> Loading -> {Results, Error}
#   Results -> Idle (reset),  Error -> Loading (retry)
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.estimate import SimulationResult

Status = Literal["idle", "loading", "results", "error"]

GENERIC_ERROR = "Failed to perform reality check. Please try again."


class InvalidTransition(ValueError):
    pass


class ViewState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Status = "idle"
    query: str = ""
    label: str = ""
    simulation: Optional[SimulationResult] = None
    error: Optional[str] = None


def _require(state: ViewState, *allowed: Status, action: str) -> None:
    if state.status not in allowed:
        raise InvalidTransition(f"cannot {action} from {state.status!r}")


def idle(error: Optional[str] = None) -> ViewState:
    return ViewState(error=error)


def begin(state: ViewState, query: str, label: Optional[str] = None) -> ViewState:
    """검색 시작 / Error 상태에서 재시도"""
    _require(state, "idle", "error", action="begin")
    return ViewState(status="loading", query=query, label=label or query)


def succeed(state: ViewState, simulation: SimulationResult) -> ViewState:
    _require(state, "loading", action="succeed")
    return ViewState(
        status="results", query=state.query, label=state.label, simulation=simulation
    )


def fail(state: ViewState, message: str = GENERIC_ERROR) -> ViewState:
    _require(state, "loading", action="fail")
    return ViewState(status="error", query=state.query, label=state.label, error=message)


def reset(state: ViewState) -> ViewState:
    _require(state, "results", action="reset")
    return idle()
