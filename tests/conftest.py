"""Pytest configuration and fixtures.

Provides:
- db: session on a fresh in-memory SQLite database per test
- client: TestClient wired to that session, an in-memory login code store
  and a temporary upload directory
- make_*: factories for persisted rows, responses included
- auth_headers: Bearer header for any persisted principal
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-signing-tokens")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("REPORT_TIMEZONE", "UTC")

from datetime import datetime  # noqa: E402
from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.clock import utcnow  # noqa: E402
from app.core.database import Base, get_db  # noqa: E402
from app.core.login_codes import InMemoryLoginCodeStore, get_login_code_store  # noqa: E402
from app.core.security import create_access_token, get_password_hash  # noqa: E402
from app.main import app  # noqa: E402
from app.models import (  # noqa: E402
    Admin,
    AdminRole,
    AdminStatus,
    Category,
    Institution,
    Question,
    QuestionAssignment,
    QuestionResponse,
    QuestionType,
    SystemAdmin,
    User,
    UserGroup,
    UserGroupMember,
)
from app.services.auth_service import role_of  # noqa: E402
from app.services.file_storage import FileStorage, get_file_storage  # noqa: E402

PASSWORD = "password123"
# bcrypt is slow on purpose; hash the shared test password once
PASSWORD_HASH = get_password_hash(PASSWORD)

MAX_TEST_UPLOAD_BYTES = 1024


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def login_code_store() -> InMemoryLoginCodeStore:
    return InMemoryLoginCodeStore()


@pytest.fixture
def storage(tmp_path) -> FileStorage:
    return FileStorage(upload_dir=str(tmp_path / "uploads"), max_size=MAX_TEST_UPLOAD_BYTES)


@pytest.fixture(scope="function")
def client(db: Session, login_code_store, storage) -> Generator[TestClient, None, None]:
    """Create a test client with database, login code and storage overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_login_code_store] = lambda: login_code_store
    app.dependency_overrides[get_file_storage] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_institution(db: Session):
    def _make(name: str = "Sunshine Welfare Center", **kwargs) -> Institution:
        values = {"timezone": "Asia/Seoul", "locale": "ko_KR"}
        values.update(kwargs)
        institution = Institution(name=name, **values)
        db.add(institution)
        db.commit()
        db.refresh(institution)
        return institution
    return _make


@pytest.fixture
def make_system_admin(db: Session):
    def _make(email: str = "system@example.com", **kwargs) -> SystemAdmin:
        system_admin = SystemAdmin(email=email, password_hash=PASSWORD_HASH, name="System Admin", **kwargs)
        db.add(system_admin)
        db.commit()
        db.refresh(system_admin)
        return system_admin
    return _make


@pytest.fixture
def make_admin(db: Session):
    def _make(institution: Institution, email: str = "admin@example.com", role: AdminRole = AdminRole.ADMIN,
              status: AdminStatus = AdminStatus.APPROVED, **kwargs) -> Admin:
        admin = Admin(
            institution_id=institution.id,
            email=email,
            password_hash=PASSWORD_HASH,
            name=kwargs.pop("name", "Center Admin"),
            role=role,
            status=status,
            **kwargs,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return admin
    return _make


@pytest.fixture
def make_user(db: Session):
    def _make(institution: Institution, username: str = "user1", **kwargs) -> User:
        user = User(
            institution_id=institution.id,
            username=username,
            password_hash=PASSWORD_HASH,
            name=kwargs.pop("name", username.title()),
            emergency_contacts=[],
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_group(db: Session):
    def _make(institution: Institution, name: str = "Morning Program", members=(), admin=None) -> UserGroup:
        group = UserGroup(
            institution_id=institution.id,
            name=name,
            member_count=len(members),
            created_by=admin.id if admin else None,
        )
        db.add(group)
        db.flush()
        for user in members:
            db.add(UserGroupMember(group_id=group.id, user_id=user.id))
        db.commit()
        db.refresh(group)
        return group
    return _make


@pytest.fixture
def make_category(db: Session):
    def _make(institution: Institution, name: str = "Daily Health") -> Category:
        category = Category(institution_id=institution.id, name=name)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category
    return _make


@pytest.fixture
def make_question(db: Session):
    def _make(institution: Institution, title: str = "Mood",
              question_type: QuestionType = QuestionType.SINGLE_CHOICE, **kwargs) -> Question:
        if question_type in (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE):
            kwargs.setdefault("options", {"choices": ["good", "okay", "bad"]})
        question = Question(
            institution_id=institution.id,
            title=title,
            content=kwargs.pop("content", f"{title}?"),
            question_type=question_type,
            **kwargs,
        )
        db.add(question)
        db.commit()
        db.refresh(question)
        return question
    return _make


@pytest.fixture
def make_assignment(db: Session):
    def _make(question: Question, user: User = None, group: UserGroup = None,
              priority: int = 5, **kwargs) -> QuestionAssignment:
        assignment = QuestionAssignment(
            institution_id=question.institution_id,
            question_id=question.id,
            user_id=user.id if user else None,
            group_id=group.id if group else None,
            priority=priority,
            assigned_at=kwargs.pop("assigned_at", utcnow()),
            **kwargs,
        )
        db.add(assignment)
        db.commit()
        db.refresh(assignment)
        return assignment
    return _make


@pytest.fixture
def make_response(db: Session):
    def _make(assignment: QuestionAssignment, user: User, answer=None,
              submitted_at: datetime = None, **kwargs) -> QuestionResponse:
        response = QuestionResponse(
            assignment_id=assignment.id,
            user_id=user.id,
            question_id=assignment.question_id,
            institution_id=assignment.institution_id,
            response_data={"answer": answer},
            submitted_at=submitted_at or utcnow(),
            **kwargs,
        )
        db.add(response)
        db.commit()
        db.refresh(response)
        return response
    return _make


def auth_headers(principal) -> dict:
    """Bearer header carrying an access token for a persisted principal."""
    role = role_of(principal)
    token, _ = create_access_token(
        subject_id=principal.id,
        role=role,
        institution_id=getattr(principal, "institution_id", None),
        authorities=[role.authority],
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="auth_headers")
def auth_headers_fixture():
    return auth_headers


# ---------------------------------------------------------------------------
# Common tenants
# ---------------------------------------------------------------------------

@pytest.fixture
def institution(make_institution) -> Institution:
    return make_institution("Sunshine Welfare Center")


@pytest.fixture
def other_institution(make_institution) -> Institution:
    return make_institution("Moonlight Care Home")


@pytest.fixture
def system_admin(make_system_admin) -> SystemAdmin:
    return make_system_admin()


@pytest.fixture
def admin(make_admin, institution) -> Admin:
    return make_admin(institution)


@pytest.fixture
def other_admin(make_admin, other_institution) -> Admin:
    return make_admin(other_institution, email="admin@moonlight.example.com")


@pytest.fixture
def user(make_user, institution) -> User:
    return make_user(institution, "user1", name="Lee Minsu")


@pytest.fixture
def other_user(make_user, other_institution) -> User:
    return make_user(other_institution, "user1", name="Park Soon")
