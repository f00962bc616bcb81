# coding: utf8
from flask import Flask

from app.lib.logger import logger
from app.lib.upload import create_storage
from .extensions import db
from .services.integration import IntegrationService


def create_app(config_app):
    app = Flask(__name__)
    app.config.from_object(config_app)
    __init_app(app)
    __init_services(app)
    return app


def __init_app(app):
    db.init_app(app)
    with app.app_context():
        db.create_all()

    logger.info("Initial app...")


def __init_services(app):
    storage = create_storage(app.config)
    app.extensions["integrations"] = IntegrationService(
        storage=storage,
        cdn_url=app.config["CLOUDFLARE_BUCKET_URL"],
        frontend_url=app.config["FRONTEND_URL"],
    )
