# app/main.py
# -----------------------------------------------------------------------------
# FastAPI 엔트리포인트
# - 로깅 설정 후 화면/API 라우터 등록
# -----------------------------------------------------------------------------
from fastapi import FastAPI

from app.core.config import settings
from app.core.logging import setup_logging
from app.routers import check, pages

setup_logging()

app = FastAPI(title=settings.APP_NAME)

app.include_router(pages.router)
app.include_router(check.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
