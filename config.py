import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "superbowl-lx")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///quiniela.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Optional engine options for better PostgreSQL behavior under concurrency
    DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 5))
    DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 10))
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_size": DB_POOL_SIZE,
        "max_overflow": DB_MAX_OVERFLOW,
    }

    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", 5000))

    # Single shared operator secret
    ADMIN_PIN = os.getenv("ADMIN_PIN", "1357")

    # Double-weight question, fixed per deployment
    WINNER_QUESTION_ID = int(os.getenv("WINNER_QUESTION_ID", 14))

    HEARTBEAT_ENABLED = os.getenv("HEARTBEAT_ENABLED", "1") == "1"
    HEARTBEAT_INTERVAL = float(os.getenv("HEARTBEAT_INTERVAL", 30))
    SUBSCRIBER_QUEUE_SIZE = int(os.getenv("SUBSCRIBER_QUEUE_SIZE", 32))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "")
    LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", 5 * 1024 * 1024))
    LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", 10))
    AUDIT_LOG_LIMIT = int(os.getenv("AUDIT_LOG_LIMIT", 1000))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    ADMIN_PIN = "1357"
    WINNER_QUESTION_ID = 14
    HEARTBEAT_ENABLED = False
    SUBSCRIBER_QUEUE_SIZE = 8
    LOG_LEVEL = "WARNING"
    LOG_FILE = ""
