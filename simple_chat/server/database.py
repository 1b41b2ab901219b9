"""SQLAlchemy engine and declarative base."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections are shared across worker threads."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args)
