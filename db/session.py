from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from db.base import Base
import logging

logger = logging.getLogger(__name__)

engine_kwargs = {"pool_pre_ping": True, "pool_recycle": 300}

def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Build a sync engine for the configured database URL"""
    url = make_url(database_url)

    # SQLite
    if url.drivername.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": echo}
        # In-memory databases must share one connection or every session sees an empty schema
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(str(url), **kwargs)

    # Hosted Postgres generally requires SSL
    if url.drivername.startswith("postgresql") and "sslmode" not in url.query:
        return create_engine(str(url), connect_args={"sslmode": "require"}, echo=echo, **engine_kwargs)

    return create_engine(str(url), echo=echo, **engine_kwargs)

def make_session_factory(engine: Engine) -> sessionmaker:
    """Create session factory bound to engine"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

def create_tables(engine: Engine):
    """Create all tables"""
    import models  # noqa: F401 ensure model registration
    Base.metadata.create_all(bind=engine)

def check_connection(engine: Engine) -> bool:
    """Return True if the database answers a trivial query"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database connectivity check failed: {e}")
        return False

def get_db(request: Request):
    """Dependency to get database session"""
    db: Session = request.app.state.session_factory()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database error: {e}")
        db.rollback()
        raise
    finally:
        db.close()
