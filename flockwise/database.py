"""
Database Configuration Module

This module handles the database setup for the farm management API.
It uses SQLAlchemy for ORM (Object-Relational Mapping) with PostgreSQL as the
production database.

The module includes:
- Base model class definition
- Engine and session factory construction
- The per-request session dependency

The engine is not created at import time. `create_app` builds it during
application startup, stores the session factory on `app.state` and disposes
the engine on shutdown.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.requests import Request

# Base is the declarative base class that our ORM models will inherit from
Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """
    Create the SQLAlchemy engine for the given URL.

    In-memory SQLite databases live on a single connection, so they get a
    StaticPool shared across threads.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    # autocommit=False means we need to explicitly commit transactions
    # autoflush=False means we need to explicitly flush changes to the database
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """
    Dependency function that provides a database session.

    A new session is created for each request from the factory owned by the
    application. Anything left uncommitted when the handler raises is rolled
    back, and the session is always closed.

    Yields:
        Session: A SQLAlchemy database session
    """
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
