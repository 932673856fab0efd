# app/core/config.py
# -----------------------------------------------------------------------------
# 전역 설정 관리 (pydantic-settings v2)
# - .env 파일과 OS 환경변수를 읽어 Settings 객체로 제공
# - Gemini 키/모델, 배달 시간 계산 상수, 로그 위치
# -----------------------------------------------------------------------------
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # 기본
    APP_NAME: str = "Q-Commerce Reality Check"
    ENV: str = "dev"

    # Gemini (generateContent REST)
    GEMINI_API_KEY: str | None = None
    API_KEY: str | None = None  # 구 배포 환경 호환
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    HTTP_TIMEOUT_S: float = 60.0

    # 이동 시간 계산
    AVG_RIDER_SPEED_KMPH: float = 20.0  # 교통 포함 도심 평균
    PACKING_TIME_MIN: float = 2.0  # 주차 후 문 앞까지

    # 로깅
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore"  # .env에 추가 필드 무시
    )

    @model_validator(mode="after")
    def _fallback_api_key(self):
        if not self.GEMINI_API_KEY and self.API_KEY:
            self.GEMINI_API_KEY = self.API_KEY
        return self


settings = Settings()
