# Import all models for Alembic to detect
from quizdesk.models.establishment import Establishment
from quizdesk.models.class_room import ClassRoom
from quizdesk.models.subject import Subject
from quizdesk.models.quiz import Quiz
from quizdesk.models.question import Question, QuestionType
from quizdesk.models.answer_option import AnswerOption
from quizdesk.models.learner import Learner
from quizdesk.models.pin_code import PinCode, LearnerPinLog
from quizdesk.models.score import Score
