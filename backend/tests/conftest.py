import os
import sys

# Add the 'backend' folder to Python path and keep the module-level engine off PostgreSQL
sys.path.insert(0, os.path.realpath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import create_db_engine, init_db
import models  # noqa: F401
from populate_db import load_fixtures, seed_database


@pytest.fixture
def engine():
    # StaticPool keeps one in-memory database for every connection
    eng = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed_data():
    return load_fixtures()


@pytest.fixture
def seeded_db(db, seed_data):
    seed_database(db, seed_data)
    db.commit()
    return db
