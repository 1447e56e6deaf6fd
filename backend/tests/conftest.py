import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from wordle_golf.database import Base, build_engine, build_session_factory, get_db
from wordle_golf.main import app


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    session_factory = build_session_factory(engine)
    Base.metadata.create_all(bind=engine)
    return session_factory


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
