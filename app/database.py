from typing import Any

from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Supabase Postgres connection (via pooler)
#
# - sslmode=require      : enforce SSL when running in the cloud
# - pool_size=1          : keep only 1 connection to the Supabase pooler
# - max_overflow=0       : do not open extra connections beyond the pool
# - connect_timeout      : bound the TCP/SSL handshake
# - statement_timeout    : bound every query server-side
#
# Other URLs (sqlite for local runs and tests) get none of the above.
# ---------------------------------------------------------


def _is_postgres(url: str) -> bool:
    return url.startswith(("postgres://", "postgresql://", "postgresql+"))


def _with_sslmode(url: str) -> str:
    if "sslmode=" in url:
        return url
    return url + ("&" if "?" in url else "?") + "sslmode=require"


def _engine_options(url: str) -> tuple[str, dict[str, Any]]:
    if not _is_postgres(url):
        return url, {}

    return _with_sslmode(url), {
        "pool_pre_ping": True,
        "pool_size": 1,
        "max_overflow": 0,
        "connect_args": {
            "connect_timeout": settings.DB_CONNECT_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        },
    }


db_url, engine_kwargs = _engine_options(settings.DATABASE_URL)

engine = create_engine(
    db_url,
    echo=False,        # set to True if you want to debug SQL queries
    **engine_kwargs,
)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
