import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-mcqprep")
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from mcqprep.core.database import Base, engine, SessionLocal
from mcqprep.core.security import create_access_token, get_password_hash
from mcqprep.main import app
from mcqprep.models import User, MCQ, MockTest
from mcqprep.utils.timezone import utc_now

PASSWORD = "password123"


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(subscription_type="free", expires_at=None, is_superuser=False, name=None, college=None):
        counter["n"] += 1
        user = User(
            name=name or f"Student {counter['n']}",
            email=f"student{counter['n']}@mcqprep.in",
            hashed_password=get_password_hash(PASSWORD),
            subscription_type=subscription_type,
            subscription_expires_at=expires_at,
            is_superuser=is_superuser,
            college=college,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def free_user(make_user):
    return make_user()


@pytest.fixture
def premium_user(make_user):
    return make_user(subscription_type="premium", expires_at=utc_now() + timedelta(days=30))


@pytest.fixture
def lifetime_user(make_user):
    return make_user(subscription_type="premium", expires_at=None)


@pytest.fixture
def expired_user(make_user):
    return make_user(subscription_type="premium", expires_at=utc_now() - timedelta(days=1))


@pytest.fixture
def admin_user(make_user):
    return make_user(is_superuser=True, name="Admin")


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token(data={"sub": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def make_mcq(db):
    def _make_mcq(correct_answer=0, is_premium=False, topic="General Surgery", difficulty="Basic", **kwargs):
        mcq = MCQ(
            question=kwargs.pop("question", "Most common site of carcinoid tumour?"),
            options=kwargs.pop("options", ["Appendix", "Ileum", "Rectum", "Stomach"]),
            correct_answer=correct_answer,
            explanation=kwargs.pop("explanation", "Explained in the chapter on small bowel tumours."),
            topic=topic,
            difficulty=difficulty,
            references=kwargs.pop("references", [{"book": "Bailey & Love", "chapter": "67", "page": "1201"}]),
            tags=kwargs.pop("tags", []),
            is_premium=is_premium,
            **kwargs,
        )
        db.add(mcq)
        db.commit()
        db.refresh(mcq)
        return mcq

    return _make_mcq


@pytest.fixture
def make_mock_test(db):
    def _make_mock_test(questions, is_premium=False, **kwargs):
        mock_test = MockTest(
            title=kwargs.pop("title", "NEET SS Grand Test"),
            description=kwargs.pop("description", "Full length test"),
            duration=kwargs.pop("duration", 90),
            question_ids=[q.id for q in questions],
            is_premium=is_premium,
            instructions=kwargs.pop("instructions", ["No negative marking"]),
            **kwargs,
        )
        db.add(mock_test)
        db.commit()
        db.refresh(mock_test)
        return mock_test

    return _make_mock_test
