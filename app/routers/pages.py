# app/routers/pages.py
# -----------------------------------------------------------------------------
# 브라우저 화면 (Jinja2)
# - GET /       : 입력 폼 (직접 입력 / 현재 위치)
# - POST /check : 탐색 실행 -> 결과 카드/차트 또는 오류 화면
# - GET /reset  : 다른 위치 확인
# -----------------------------------------------------------------------------
from pathlib import Path

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from loguru import logger

from app.core.config import settings
from app.core.platforms import PROMISE_MINUTES
from app.services import view_state
from app.services.charts import build_travel_time_chart, chart_html
from app.services.discovery import is_web_link
from app.services.reality_check import run_discovery

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.tests["web_link"] = is_web_link

router = APIRouter(tags=["pages"])

FEASIBILITY_CLASSES = {
    "Highly Feasible": "good",
    "Borderline": "warn",
    "Unlikely": "bad",
    "Unknown": "muted",
}


def _render(request: Request, state: view_state.ViewState):
    simulation = state.simulation
    chart = ""
    estimates = []
    if simulation is not None:
        chart = chart_html(build_travel_time_chart(simulation.estimates))
        estimates = [e.model_dump(mode="json", by_alias=True) for e in simulation.estimates]
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "app_name": settings.APP_NAME,
            "state": state,
            "simulation": simulation,
            "chart": chart,
            "estimates_json": estimates,
            "promise": PROMISE_MINUTES,
            "feasibility_classes": FEASIBILITY_CLASSES,
        },
    )


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return _render(request, view_state.idle())


@router.post("/check", response_class=HTMLResponse)
async def check(request: Request, query: str = Form(""), label: str = Form("")):
    query = query.strip()
    if not query:
        return _render(request, view_state.idle("Please enter a location."))

    state = view_state.begin(view_state.idle(), query, label.strip() or None)
    try:
        simulation = await run_discovery(state.query, state.label)
        state = view_state.succeed(state, simulation)
    except Exception:
        logger.exception(f"[Pages] 검색 실패: {query!r}")
        state = view_state.fail(state)
    return _render(request, state)


@router.get("/reset", response_class=HTMLResponse)
async def reset(request: Request, query: str = "", label: str = ""):
    # 서버는 세션을 두지 않으므로 떠나는 결과 화면 스냅샷을 링크 값으로 복원
    leaving = view_state.ViewState(status="results", query=query, label=label or query)
    return _render(request, view_state.reset(leaving))
