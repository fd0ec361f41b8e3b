"""Database configuration and session management."""
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio.core.config import get_settings
from portfolio.core.logging import setup_logging
from portfolio.core.monitoring import setup_monitoring

logger = setup_logging('core_database')
monitoring = setup_monitoring('database')

# Initialize base class for declarative models
Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def create_tables_if_missing(engine: Engine):
    """Create missing tables in the database."""
    # Models must be imported so their tables are registered on Base
    from portfolio.core import models  # noqa: F401

    try:
        monitoring.increment('create_tables')
        existing_tables = inspect(engine).get_table_names()

        with engine.begin() as conn:
            for table in Base.metadata.sorted_tables:
                if table.name not in existing_tables:
                    logger.info(f"Creating missing table: {table.name}")
                    table.create(conn)

        monitoring.track_success('create_tables')

    except Exception as e:
        monitoring.track_error('create_tables', str(e))
        logger.error(f"Error creating tables: {str(e)}")
        raise


def build_engine(database_url: str) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if database_url.startswith('sqlite'):
        kwargs = {'connect_args': {'check_same_thread': False}}
        if database_url in ('sqlite://', 'sqlite:///:memory:'):
            kwargs['poolclass'] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        try:
            monitoring.increment('get_engine')
            _engine = build_engine(get_settings().database_url)
            create_tables_if_missing(_engine)
            monitoring.track_success('get_engine')
        except Exception as e:
            monitoring.track_error('get_engine', str(e))
            logger.error(f"Error getting database engine: {str(e)}")
            raise
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _session_factory


def init_database() -> Engine:
    """Initialize the engine and make sure all tables exist."""
    engine = get_engine()
    create_tables_if_missing(engine)
    return engine


@contextmanager
def get_session(factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    """Get a managed database session that commits on success and rolls back on error."""
    session = (factory or get_session_factory())()
    try:
        monitoring.increment('get_session')
        yield session
        session.commit()
        monitoring.track_success('get_session')

    except Exception as e:
        session.rollback()
        monitoring.track_error('get_session', str(e))
        logger.error(f"Error in database session: {str(e)}")
        raise

    finally:
        session.close()
