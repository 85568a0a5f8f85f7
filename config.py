import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _db_uri():
    # Prefer external data dir for packaged app
    data_dir = os.environ.get("PORTAL_DATA_DIR")
    if data_dir:
        os.makedirs(data_dir, exist_ok=True)
        return "sqlite:///" + os.path.join(data_dir, "portal.db")

    # Fallback to DATABASE_URL or local sqlite
    return os.environ.get(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "portal.db"),
    )


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-change-me")  # change in production
    SQLALCHEMY_DATABASE_URI = _db_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Embedded in every asset, permit and requisition number
    OFFICE_CODE = os.environ.get("COUNCIL_OFFICE_CODE", "258")
    COUNCIL_NAME = os.environ.get("COUNCIL_NAME", "Council Secretariat")

    NUMBERING_ATTEMPTS = int(os.environ.get("NUMBERING_ATTEMPTS", "3"))
    SEED_DEFAULT_CATEGORIES = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
    OFFICE_CODE = "258"
