import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from scheduler.database import Base, init_db  # noqa: E402
from tests.factories import add_representative, add_schedule, add_user  # noqa: E402


@pytest.fixture
def db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    init_db(bind=engine)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def representative(db):
    rep = add_representative(db)
    add_schedule(db, rep.id)
    return rep


@pytest.fixture
def requester(db):
    return add_user(db, 'requester@example.com', full_name='Req Uester')
