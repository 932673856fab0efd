# app/core/logging.py
# -----------------------------------------------------------------------------
# Loguru 기반 로깅 설정
# - 파일 회전/백트레이스/레벨 지정 + 콘솔 출력
# -----------------------------------------------------------------------------
import sys
from pathlib import Path

from loguru import logger

from app.core.config import settings


def setup_logging(log_dir: str | None = None, level: str | None = None) -> None:
    level = level or settings.LOG_LEVEL
    path = Path(log_dir or settings.LOG_DIR)
    path.mkdir(exist_ok=True, parents=True)

    logger.remove()  # 기본 핸들러 제거
    logger.add(sys.stderr, level=level)
    logger.add(
        path / "app.log",
        rotation="10 MB",
        retention=10,  # 파일 10개 보관
        enqueue=True,  # 멀티프로세스 안전
        backtrace=True,
        diagnose=False,
        level=level,
    )
