# ================== LOGURU LOGGER CONFIG =====================
import sys
import os
from loguru import logger

LOG_DIR = os.environ.get("LOG_DIR") or "logs"

log_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>org:{extra[org]}</cyan> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

logger.remove()
logger.configure(extra={"org": "-"})
logger.add(sys.stderr, colorize=True, format=log_format, level="INFO")

if os.environ.get("FLASK_CONFIG") != "testing":
    os.makedirs(LOG_DIR, exist_ok=True)
    logger.add(
        os.path.join(LOG_DIR, "channels_service.json"),
        rotation="100 MB",
        retention="10 days",
        compression="zip",
        serialize=True,
        level="DEBUG",
        enqueue=True,
        catch=True,
    )


def org_logger(org):
    """Logger bound to an organization, shown in the `org:` column."""
    return logger.bind(org=org or "-")
