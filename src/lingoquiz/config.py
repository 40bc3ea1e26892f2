import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    PROJECT_NAME: str = "lingoquiz"
    DEBUG: bool = _env_bool("LINGOQUIZ_DEBUG", False)
    LOG_DIR: str = os.environ.get("LINGOQUIZ_LOG_DIR", "log")
    LOG_FILE: str = "lingoquiz.log"
    LOG_TO_DB: bool = _env_bool("LINGOQUIZ_LOG_TO_DB", False)
    DB_DIR: str = os.environ.get("LINGOQUIZ_DB_DIR", "db")
    DB_FILE: str = "lingoquiz.db"
    VOCAB_DIR: str = os.environ.get("LINGOQUIZ_VOCAB_DIR", "vocabulary")
    TEST_SIZE: int = 10
    TIME_LIMIT_PER_QUESTION: float = 15.0
    DISTRACTOR_COUNT: int = 3
    TIMER_INTERVAL: float = 0.1
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
