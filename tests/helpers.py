"""
Seeding helpers shared by the test modules.
"""
from typing import Iterable, Optional, Sequence, Tuple
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.models import (
    AnswerOption, ClassRoom, Establishment, Learner, PinCode, Question, Quiz, Score
)


async def seed_school(db: AsyncSession, pin_code: str = "1234", pin_active: bool = True):
    establishment = Establishment(name="LYCEE ANDOHALO")
    classroom = ClassRoom(name="Terminale A")
    pin = PinCode(code=pin_code, description="Rentrée", is_active=pin_active)
    db.add_all([establishment, classroom, pin])
    await db.flush()
    return establishment, classroom, pin


async def seed_learner(
        db: AsyncSession,
        identifiant: str = "U000001",
        name: str = "Rakoto",
        class_id: Optional[int] = None,
        pin_id: Optional[int] = None
) -> Learner:
    learner = Learner(identifiant=identifiant, name=name, class_id=class_id, pin_id=pin_id)
    db.add(learner)
    await db.flush()
    return learner


async def seed_quiz(db: AsyncSession, class_id: int, is_active: bool = True, title: str = "Géographie") -> Quiz:
    quiz = Quiz(class_id=class_id, title=title, type="choice", is_active=is_active)
    db.add(quiz)
    await db.flush()
    return quiz


async def seed_question(
        db: AsyncSession,
        quiz_id: int,
        question_type: str,
        options: Iterable[Tuple[int, str, bool, Optional[int]]] = (),
        canonical_answer: Optional[str] = None
) -> Question:
    """options are (choice_index, text, is_correct, correct_order) tuples"""
    question = Question(
        quiz_id=quiz_id,
        question_text="Question",
        type=question_type,
        canonical_answer=canonical_answer
    )
    db.add(question)
    await db.flush()
    db.add_all([
        AnswerOption(
            question_id=question.id,
            choice_index=index,
            option_text=text,
            is_correct=is_correct,
            correct_order=order
        )
        for index, text, is_correct, order in options
    ])
    await db.flush()
    return question


def ordering_options(expected: Sequence[int]):
    """Options whose correct_order ranks produce the expected permutation"""
    rank_of = {choice_index: rank for rank, choice_index in enumerate(expected, start=1)}
    return [
        (choice_index, f"Step {choice_index}", False, rank_of[choice_index] * 10)
        for choice_index in sorted(expected)
    ]


async def count_scores(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(Score.id)))).scalar_one()
