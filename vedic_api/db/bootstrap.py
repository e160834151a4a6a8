# vedic_api/db/bootstrap.py
import os
import structlog
from alembic import command
from alembic.config import Config

from vedic_api.db.session import SQLALCHEMY_DATABASE_URL

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

logger = structlog.get_logger(__name__)


def run_migrations(database_url: str = SQLALCHEMY_DATABASE_URL) -> None:
    cfg = Config()
    cfg.set_main_option("script_location", os.path.join(BASE_DIR, "migrations"))
    # configparser interpolation: escape literal percent signs
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))

    command.upgrade(cfg, "head")
    logger.info("migrations applied", revision="head")
