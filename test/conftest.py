"""
Pytest configuration and fixtures for CMS Fields tests
"""

import os
import sys
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

from cms_fields.containers.base import PostMetaContainer  # noqa: E402
from cms_fields.containers.registry import container_registry  # noqa: E402
from cms_fields.database import Base, get_db  # noqa: E402
from cms_fields.datastore.memory import MemoryDatastore  # noqa: E402
from cms_fields.fields.basic import TextField  # noqa: E402
from cms_fields.fields.complex import ComplexField  # noqa: E402
from cms_fields.models.field_meta import FieldMeta  # noqa: E402, F401
from utils.field_factories import make_gallery  # noqa: E402

# In-memory SQLite shared by every connection of the test engine
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def gallery() -> ComplexField:
    return make_gallery()


@pytest.fixture
def memory_store() -> MemoryDatastore:
    return MemoryDatastore()


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Provide a session on a freshly created schema."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def registered_container() -> Generator[PostMetaContainer, None, None]:
    """Register a ``page_extras`` container for the duration of one test."""
    container_registry.clear()
    container = PostMetaContainer("Page Extras").add_fields([TextField("subtitle"), make_gallery()])
    container_registry.register(container)
    yield container
    container_registry.clear()


@pytest.fixture
def client(db_session: Session, registered_container: PostMetaContainer) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application with the test database"""
    from cms_fields.main import app

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
