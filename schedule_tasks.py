import os
import atexit
import time
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path, override=True)

from apscheduler.schedulers.background import BackgroundScheduler  # noqa
from apscheduler.triggers.interval import IntervalTrigger  # noqa

from app import create_app as create_flask_app  # noqa
from app.config import configs as config  # noqa
from app.lib.logger import logger  # noqa
from app.schedules.refresh_integration_tokens import (  # noqa
    refresh_integration_tokens,
)

# Provider identifier -> token refresher; filled in by provider packages
REFRESHERS = {}


def create_app():
    config_name = os.environ.get("FLASK_CONFIG", "develop")
    config_app = config.get(config_name, config["develop"])
    return create_flask_app(config_app)


def start_scheduler(app, refreshers=None):
    scheduler = BackgroundScheduler()

    refresh_trigger = IntervalTrigger(hours=app.config["REFRESH_CHECK_HOURS"])

    scheduler.add_job(
        func=lambda: refresh_integration_tokens(app, refreshers or REFRESHERS),
        trigger=refresh_trigger,
        id="refresh_integration_tokens",
    )

    atexit.register(lambda: scheduler.shutdown(wait=False))
    scheduler.start()

    logger.info("Scheduler started successfully.")
    return scheduler


if __name__ == "__main__":
    app = create_app()
    scheduler = start_scheduler(app)

    try:
        logger.info("while True loop...")
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down scheduler...")
        scheduler.shutdown()
