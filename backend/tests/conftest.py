import os
import sys

os.environ.setdefault("SECRET_KEY", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from schoolsite import models  # noqa: F401
from schoolsite.api import admin_auth as admin_auth_api
from schoolsite.api import admin_data, deps, public
from schoolsite.database import Base
from schoolsite.errors import register_exception_handlers
from schoolsite.services import admin_auth
from schoolsite.services.provisioning import ensure_admin_credential

ADMIN_PASSWORD = "secret1"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def app(session_factory):
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(admin_auth_api.router, prefix="/api")
    app.include_router(admin_data.router, prefix="/api")
    app.include_router(public.router, prefix="/api")

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def provisioned_admin(db):
    """Admin credential as created at deployment, still awaiting its password."""
    return ensure_admin_credential(db)


@pytest.fixture
def initialized_admin(db, provisioned_admin):
    return admin_auth.init_password(db, ADMIN_PASSWORD)


@pytest.fixture
def session_token(db, initialized_admin):
    token, _ = admin_auth.login(db, initialized_admin.username, ADMIN_PASSWORD)
    return token
