from __future__ import annotations

import os
import tempfile

# Must be set before contract_engine.db.session builds its engine.
os.environ.setdefault("DATABASE_URL", f"sqlite:///{tempfile.gettempdir()}/contract_engine_test.db")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from contract_engine.db.models import Base


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'contracts.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
