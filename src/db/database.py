"""Generate database session"""

from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings
from src.db.schema import Base


def make_session_factory(settings: Settings, echo: bool = False) -> sessionmaker[Session]:
    """Engine for the configured URL, with all tables created."""
    engine: Engine = create_engine(settings.database_url, echo=echo)

    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
