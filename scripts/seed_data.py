"""Seed database with a demo institution and its data."""
import sys
from datetime import date, datetime, timezone
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.database import SessionLocal
from app.core.security import get_password_hash
from app.models import (
    Admin,
    AdminRole,
    AdminStatus,
    Category,
    Institution,
    Question,
    QuestionAssignment,
    QuestionType,
    SeverityLevel,
    SystemAdmin,
    User,
    UserGroup,
    UserGroupMember,
)


def seed():
    """Create one institution with admins, users, a group and assigned questions.

    Tables must already exist (run ``alembic upgrade head`` first).
    """
    db = SessionLocal()

    try:
        if db.query(Institution).first():
            print("Institutions already exist. Skipping seed.")
            return

        system_admin = SystemAdmin(
            email="system@welfare.example.com",
            password_hash=get_password_hash("system123"),
            name="System Admin",
        )
        institution = Institution(
            name="Sunshine Welfare Center",
            business_number="123-45-67890",
            phone="02-1234-5678",
            email="contact@sunshine.example.com",
            director_name="Kim Director",
        )
        db.add_all([system_admin, institution])
        db.flush()

        admin = Admin(
            institution_id=institution.id,
            email="admin@sunshine.example.com",
            password_hash=get_password_hash("admin123"),
            name="Center Admin",
            role=AdminRole.ADMIN,
            status=AdminStatus.APPROVED,
            approved_by=system_admin.id,
            approved_at=datetime.now(tz=timezone.utc),
        )
        staff = Admin(
            institution_id=institution.id,
            email="staff@sunshine.example.com",
            password_hash=get_password_hash("staff123"),
            name="Center Staff",
            role=AdminRole.STAFF,
            status=AdminStatus.PENDING,
        )
        db.add_all([admin, staff])
        db.flush()

        users = [
            User(
                institution_id=institution.id,
                username="user1",
                password_hash=get_password_hash("user123"),
                name="Lee Minsu",
                birth_date=date(1950, 3, 14),
                severity=SeverityLevel.MILD,
                guardian_name="Lee Jihye",
                guardian_phone="010-1111-2222",
                emergency_contacts=[{"name": "Lee Jihye", "phone": "010-1111-2222", "relation": "daughter"}],
            ),
            User(
                institution_id=institution.id,
                username="user2",
                password_hash=get_password_hash("user123"),
                name="Park Soon",
                birth_date=date(1946, 11, 2),
                severity=SeverityLevel.MODERATE,
            ),
            User(
                institution_id=institution.id,
                username="user3",
                password_hash=get_password_hash("user123"),
                name="Choi Young",
                severity=SeverityLevel.SEVERE,
            ),
        ]
        db.add_all(users)
        db.flush()

        group = UserGroup(
            institution_id=institution.id,
            name="Morning Program",
            description="Participants of the morning activity program",
            created_by=admin.id,
            member_count=2,
        )
        db.add(group)
        db.flush()
        db.add_all([
            UserGroupMember(group_id=group.id, user_id=users[0].id, added_by=admin.id),
            UserGroupMember(group_id=group.id, user_id=users[1].id, added_by=admin.id),
        ])

        category = Category(
            institution_id=institution.id,
            name="Daily Health",
            description="Daily wellbeing check",
            created_by=admin.id,
        )
        db.add(category)
        db.flush()

        questions = [
            Question(
                institution_id=institution.id,
                category_id=category.id,
                title="Mood",
                content="How do you feel today?",
                question_type=QuestionType.SINGLE_CHOICE,
                options={"choices": ["good", "okay", "bad"]},
                allow_other_option=True,
                created_by=admin.id,
            ),
            Question(
                institution_id=institution.id,
                category_id=category.id,
                title="Medication",
                content="Did you take your medication?",
                question_type=QuestionType.YES_NO,
                created_by=admin.id,
            ),
            Question(
                institution_id=institution.id,
                title="Sleep quality",
                content="Rate your sleep last night.",
                question_type=QuestionType.SCALE,
                options={"min": 1, "max": 5},
                created_by=admin.id,
            ),
        ]
        db.add_all(questions)
        db.flush()

        db.add_all([
            QuestionAssignment(
                institution_id=institution.id, question_id=questions[0].id,
                group_id=group.id, priority=1, assigned_by=admin.id,
            ),
            QuestionAssignment(
                institution_id=institution.id, question_id=questions[1].id,
                user_id=users[0].id, priority=2, assigned_by=admin.id,
            ),
            QuestionAssignment(
                institution_id=institution.id, question_id=questions[2].id,
                user_id=users[2].id, priority=3, assigned_by=admin.id,
            ),
        ])
        db.commit()

        print("✅ Seeded demo data:")
        print("  - system@welfare.example.com (password: system123)")
        print("  - admin@sunshine.example.com (password: admin123, approved)")
        print("  - staff@sunshine.example.com (password: staff123, pending approval)")
        print("  - user1, user2, user3 (password: user123)")

    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
