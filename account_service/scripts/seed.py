"""
Reset the database to the demo data set. Run from project root:
  python -m account_service.scripts.seed

Deletes every user and secret question, then inserts the question catalog
and four users (two ADMIN, two USER). Seed users are validated with the
same rules as signup before anything is deleted.
"""
import asyncio
import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from account_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from account_service.api.utils.log_config import setup_logging
from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.app.use_cases.auth.validation import (
    first_error,
    normalize_about_slug,
    validate_about_content,
    validate_about_slug,
    validate_email,
    validate_password,
    validate_question_id,
    validate_required,
    validate_role,
)
from account_service.domain.entities import Role, SecretQuestion, User
from account_service.libs.result import Error

logger = logging.getLogger(__name__)

SECRET_QUESTIONS = [
    "What was the name of your first pet?",
    "What was the name of your elementary school?",
    "What was your childhood nickname?",
    "What is your favorite color?",
    "What is your favorite food?",
    "What is your favorite movie?",
    "Which country did you first travel to abroad?",
]


@dataclass
class UserSeed:
    name: str
    email: str
    password: str
    role: Role
    secret_question_id: int
    secret_answer: str
    about_slug: Optional[str] = None
    about_content: str = ""


USER_SEEDS = [
    UserSeed(
        name="Ada Loadbalance",
        email="admin01@example.com",
        password="password1111",
        role=Role.ADMIN,
        secret_question_id=1,
        secret_answer="Rex",
    ),
    UserSeed(
        name="Fixit Bugsworth",
        email="admin02@example.com",
        password="password2222",
        role=Role.ADMIN,
        secret_question_id=2,
        secret_answer="Maple Street Elementary",
    ),
    UserSeed(
        name="Syntax Errorson",
        email="user01@example.com",
        password="password1111",
        role=Role.USER,
        secret_question_id=3,
        secret_answer="Semicolon",
        about_slug="syntax",
        about_content="Hi, I'm Syntax Errorson.<br>Nice to meet you.",
    ),
    UserSeed(
        name="Vague Specwright",
        email="user02@example.com",
        password="password2222",
        role=Role.USER,
        secret_question_id=4,
        secret_answer="Bluish blue",
        about_slug="vague",
        about_content="I'm Vague Specwright. Let's get along.",
    ),
]


class SeedValidationError(Exception):
    def __init__(self, index: int, error: Error):
        self.index = index
        self.error = error
        super().__init__(f"Validation failed at record {index}: {error.message}")


def validate_user_seed(seed: UserSeed) -> Optional[Error]:
    return first_error(
        validate_required(seed.name, "name"),
        validate_email(seed.email),
        validate_password(seed.password),
        validate_role(seed.role),
        validate_about_slug(seed.about_slug),
        validate_about_content(seed.about_content),
        validate_question_id(seed.secret_question_id),
        validate_required(seed.secret_answer, "secretAnswer"),
    )


def validate_user_seeds(seeds: List[UserSeed]) -> None:
    """Raise SeedValidationError for the first invalid record"""
    for index, seed in enumerate(seeds):
        error = validate_user_seed(seed)
        if error is not None:
            raise SeedValidationError(index, error)


async def seed_database(
    uow: UnitOfWork,
    hasher: PasswordHasher,
    questions: List[str] = SECRET_QUESTIONS,
    user_seeds: List[UserSeed] = USER_SEEDS,
) -> None:
    """
    Replace all users and secret questions with the seed data.

    Question ids are assigned explicitly (1..n) so seed users can refer to
    them regardless of the database's id sequence state.
    """
    validate_user_seeds(user_seeds)

    async with uow:
        deleted_users = await uow.users.delete_all()
        deleted_questions = await uow.secret_questions.delete_all()
        logger.info(f"Deleted {deleted_users} users and {deleted_questions} secret questions")

        for question_id, text in enumerate(questions, start=1):
            await uow.secret_questions.create(SecretQuestion(id=question_id, question=text))

        now = datetime.utcnow()
        for seed in user_seeds:
            await uow.users.create(
                User(
                    name=seed.name,
                    email=seed.email,
                    password_hash=hasher.hash(seed.password),
                    role=Role(seed.role),
                    about_slug=normalize_about_slug(seed.about_slug),
                    about_content=seed.about_content or "",
                    secret_question_id=seed.secret_question_id,
                    secret_answer_hash=hasher.hash(seed.secret_answer),
                    created_at=now,
                    updated_at=now,
                )
            )

        await uow.commit()

    logger.info(f"Inserted {len(questions)} secret questions and {len(user_seeds)} users")


async def run(config=ApplicationConfig) -> None:
    engine = create_async_engine(config.DB_URI, echo=False, future=True)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with session_factory() as session:
            await seed_database(
                SqlAlchemyUnitOfWork(session), PasswordHasher(rounds=config.BCRYPT_ROUNDS)
            )
    finally:
        await engine.dispose()


def main() -> int:
    setup_logging(ApplicationConfig.LOG_LEVEL)
    logger.info("Seeding database...")
    try:
        asyncio.run(run())
    except SeedValidationError as exc:
        logger.error(str(exc))
        return 1
    logger.info("Seeding completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
