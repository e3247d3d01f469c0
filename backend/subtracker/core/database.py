from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from subtracker.core.settings import settings

SQLALCHEMY_DATABASE_URL = settings.database_url


def _connect_args(database_url: str) -> dict:
    url = make_url(database_url)
    drivername = url.drivername or ""
    if drivername.startswith("sqlite"):
        return {"check_same_thread": False}
    if drivername.startswith("postgresql") and settings.db_statement_timeout_ms > 0:
        return {"options": f"-c statement_timeout={settings.db_statement_timeout_ms}"}
    return {}


engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=_connect_args(SQLALCHEMY_DATABASE_URL),
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ping(bind: Engine | None = None) -> None:
    with (bind or engine).connect() as conn:
        conn.execute(text("SELECT 1"))
