from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from nexsched.core import config


def build_engine(database_url: str):
    connect_args = {}
    if database_url.startswith('sqlite'):
        # Sessions are handed to worker threads by FastAPI and the booking lock.
        connect_args['check_same_thread'] = False
    return create_engine(database_url, connect_args=connect_args)


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
