import os


class Settings:
    PROJECT_NAME: str = "wordquest"
    DEBUG: bool = os.environ.get("WORDQUEST_DEBUG", "0") == "1"
    LOG_DIR: str = os.environ.get("WORDQUEST_LOG_DIR", "log")
    LOG_FILE: str = "wordquest.log"
    DB_DIR: str = os.environ.get("WORDQUEST_DB_DIR", "db")
    DB_FILE: str = "wordquest.db"
    DB_LOGGING: bool = os.environ.get("WORDQUEST_DB_LOGGING", "0") == "1"
    VOCAB_DIR: str = os.environ.get("WORDQUEST_VOCAB_DIR", "vocabulary")
    EXERCISE_COUNT: int = 10
    SESSION_COOKIE_NAME: str = "wordquest_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    REVIEW_POLICY: str = os.environ.get("WORDQUEST_REVIEW_POLICY", "linear")
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
