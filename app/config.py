# coding: utf8
import os


class Config(object):
    SECRET_KEY = os.environ.get("SECRET_KEY") or "<your secret key>"

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL"
    ) or "{engine}://{user}:{password}@{host}:{port}/{db}".format(
        engine=os.environ.get("SQLALCHEMY_ENGINE") or "mysql+pymysql",
        user=os.environ.get("SQLALCHEMY_USER") or "root",
        password=os.environ.get("SQLALCHEMY_PASSWORD") or "",
        host=os.environ.get("SQLALCHEMY_HOST") or "127.0.0.1",
        port=int(os.environ.get("SQLALCHEMY_PORT", 3306)),
        db=os.environ.get("SQLALCHEMY_DATABASE") or "channels",
    )

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_size": 20,
        "max_overflow": 50,
        "pool_timeout": 10,
        "pool_recycle": 900,
        "pool_pre_ping": True,
    }

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # A picture already hosted under both of these is not uploaded again
    FRONTEND_URL = os.environ.get("FRONTEND_URL") or "http://localhost:4200"
    CLOUDFLARE_BUCKET_URL = os.environ.get("CLOUDFLARE_BUCKET_URL") or ""

    STORAGE_PROVIDER = os.environ.get("STORAGE_PROVIDER") or "local"
    UPLOAD_DIRECTORY = os.environ.get("UPLOAD_DIRECTORY") or os.path.join(
        os.getcwd(), "uploads"
    )

    CLOUDFLARE_ACCOUNT_ID = os.environ.get("CLOUDFLARE_ACCOUNT_ID") or ""
    CLOUDFLARE_ACCESS_KEY = os.environ.get("CLOUDFLARE_ACCESS_KEY") or ""
    CLOUDFLARE_SECRET_ACCESS_KEY = (
        os.environ.get("CLOUDFLARE_SECRET_ACCESS_KEY") or ""
    )
    CLOUDFLARE_BUCKETNAME = os.environ.get("CLOUDFLARE_BUCKETNAME") or ""
    CLOUDFLARE_REGION = os.environ.get("CLOUDFLARE_REGION") or "auto"

    REFRESH_CHECK_HOURS = int(os.environ.get("REFRESH_CHECK_HOURS") or 1)

    PROPAGATE_EXCEPTIONS = os.environ.get("FLASK_CONFIG") == "production"


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    STORAGE_PROVIDER = "local"
    FRONTEND_URL = "http://frontend.test"
    CLOUDFLARE_BUCKET_URL = "https://cdn.test"


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False
    TESTING = False


configs = {
    "develop": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
