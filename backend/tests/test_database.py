from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

import database
from database import get_db


class TrackingSession(Session):
    closed = False

    def close(self):
        self.closed = True
        super().close()


def test_get_db_yields_a_session_and_closes_it(engine, monkeypatch):
    monkeypatch.setattr(database, "SessionLocal", sessionmaker(bind=engine, class_=TrackingSession))

    gen = get_db()
    db = next(gen)
    assert isinstance(db, TrackingSession)
    assert db.execute(text("SELECT 1")).scalar() == 1
    assert not db.closed

    gen.close()
    assert db.closed
