"""Database engine and session management."""

import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.logging import get_logger
from core.models import Base
from core.settings import get_settings

settings = get_settings()
logger = get_logger(__name__)

engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if settings.database_url.startswith("sqlite") else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE RESTRICT/CASCADE unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    # Import model modules so their tables are registered on Base.metadata
    from modules.categories import models as _categories  # noqa: F401
    from modules.events import models as _events  # noqa: F401
    from modules.expenses import models as _expenses  # noqa: F401
    from modules.orders import models as _orders  # noqa: F401
    from modules.portion_controls import models as _portion_controls  # noqa: F401
    from modules.products import models as _products  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready (%s)", engine.url.render_as_string(hide_password=True))
