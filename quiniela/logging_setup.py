import logging
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    root = logging.getLogger("quiniela")
    root.setLevel(level)

    if not any(getattr(h, "_quiniela", False) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        console._quiniela = True
        root.addHandler(console)

        log_file = app.config.get("LOG_FILE")
        if log_file:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=app.config.get("LOG_MAX_BYTES", 5 * 1024 * 1024),
                backupCount=app.config.get("LOG_BACKUP_COUNT", 10),
                encoding="utf-8",
            )
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            file_handler._quiniela = True
            root.addHandler(file_handler)

    return root
