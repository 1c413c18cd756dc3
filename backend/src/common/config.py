import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv


# =============================================================================
# 1. Environment Loading (최상위 .env 자동 탐색)
# =============================================================================
def get_project_root() -> Path:
    """
    현재 파일의 위치를 기준으로 .env 파일이 있는 프로젝트 루트를 찾습니다.
    확실한 탐색을 위해 상위로 이동하며 .env나 .git을 찾습니다.
    """
    current_path = Path(__file__).resolve()
    for parent in current_path.parents:
        if (parent / ".env").exists() or (parent / ".git").exists():
            return parent
    return current_path.parents[3]  # Fallback


PROJECT_ROOT = get_project_root()
ENV_PATH = PROJECT_ROOT / ".env"

if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
else:
    load_dotenv()  # 시스템 환경변수 사용


# =============================================================================
# 2. Helper Functions
# =============================================================================
def get_env(key: str, default: Any = None, cast_to: type = str) -> Any:
    """환경변수를 가져오고 원하는 타입으로 안전하게 변환합니다."""
    value = os.getenv(key)
    if value is None:
        return default

    if cast_to is bool:
        return value.lower() in ("true", "1", "yes", "on")
    if cast_to is list:
        return [x.strip() for x in value.split(",") if x.strip()]
    try:
        return cast_to(value)
    except (ValueError, TypeError):
        return default


# =============================================================================
# 3. Database Configuration
# =============================================================================
DB_CONFIG = {
    "host": get_env("PG_HOST", get_env("DB_HOST", "localhost")),
    "port": get_env("PG_PORT", get_env("DB_PORT", "5432")),
    "user": get_env("PG_USER", get_env("DB_USER", "postgres")),
    "password": get_env("PG_PASSWORD", get_env("DB_PASSWORD", "")),
    "database": get_env("PG_DATABASE", get_env("DB_NAME", "mentoring")),
    # 지정 시 위 항목 대신 그대로 사용 (e.g., sqlite+aiosqlite:///./local.db)
    "url": get_env("DATABASE_URL"),
}

# =============================================================================
# 4. Mentoring Lifecycle Configuration
# =============================================================================
MENTORING_CONFIG = {
    # 신청 후 멘토가 응답하지 않으면 자동취소되기까지의 시간 (기본 48시간)
    "auto_cancel_delay_ms": get_env("AUTO_CANCEL_DELAY_MS", 172_800_000, int),
    # 일/월 단위 정산 기준이 되는 서비스 타임존
    "timezone": get_env("SERVICE_TIMEZONE", "Asia/Seoul"),
    "max_request_times": 3,
}

# =============================================================================
# 5. Report & Compensation Configuration
# =============================================================================
COMPENSATION_CONFIG = {
    "money_per_hour": get_env("MONEY_PER_HOUR", 100_000, int),
    "daily_cap_hours": get_env("DAILY_CAP_HOURS", 4, int),
    "monthly_cap_hours": get_env("MONTHLY_CAP_HOURS", 10, int),
}

REPORT_CONFIG = {
    "max_images": get_env("REPORT_MAX_IMAGES", 2, int),
    "feedback_min": 1,
    "feedback_max": 5,
}

# =============================================================================
# 6. Mail Configuration
# =============================================================================
MAIL_CONFIG = {
    # log: 로그만 남김 (개발/테스트), http: 메일 API 호출
    "provider": get_env("MAIL_PROVIDER", "log"),
    "api_url": get_env("MAIL_API_URL"),
    "api_key": get_env("MAIL_API_KEY"),
    "timeout": get_env("MAIL_TIMEOUT", 10.0, float),
}

ALLOWED_MAIL_PROVIDERS = ["log", "http"]

if MAIL_CONFIG["provider"] not in ALLOWED_MAIL_PROVIDERS:
    raise RuntimeError(f"Invalid MAIL_PROVIDER: {MAIL_CONFIG['provider']}. Allowed: {ALLOWED_MAIL_PROVIDERS}")
