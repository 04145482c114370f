"""Initial quiz schema

Revision ID: a20261019initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a20261019initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())]


def upgrade() -> None:
    op.create_table(
        'establishments',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(150), unique=True, nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'classes',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'subjects',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('class_id', sa.Integer, sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'pin_codes',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('code', sa.String(50), unique=True, nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('used_by', sa.Integer, nullable=True),
        sa.Column('used_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_pin_codes_code', 'pin_codes', ['code'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('identifiant', sa.String(20), unique=True, nullable=False),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('establishment_id', sa.Integer, sa.ForeignKey('establishments.id'), nullable=True),
        sa.Column('class_id', sa.Integer, sa.ForeignKey('classes.id'), nullable=True),
        sa.Column('pin_id', sa.Integer, sa.ForeignKey('pin_codes.id'), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_identifiant', 'users', ['identifiant'])
    op.create_index('ix_users_class_id', 'users', ['class_id'])

    op.create_table(
        'user_pin_logs',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('pin_id', sa.Integer, sa.ForeignKey('pin_codes.id'), nullable=False),
        sa.Column('logged_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        *_timestamps(),
    )
    op.create_index('ix_user_pin_logs_user_id', 'user_pin_logs', ['user_id'])

    op.create_table(
        'quizzes',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('class_id', sa.Integer, sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('subject_id', sa.Integer, sa.ForeignKey('subjects.id'), nullable=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('type', sa.String(30), nullable=False, server_default='choice'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.Integer, nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_quizzes_class_id', 'quizzes', ['class_id'])
    op.create_index('ix_quizzes_subject_id', 'quizzes', ['subject_id'])

    op.create_table(
        'questions',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('quiz_id', sa.Integer, sa.ForeignKey('quizzes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('subject_id', sa.Integer, sa.ForeignKey('subjects.id'), nullable=True),
        sa.Column('question_text', sa.Text, nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='choice'),
        sa.Column('time_limit', sa.Integer, nullable=False, server_default='30'),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('canonical_answer', sa.Text, nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        *_timestamps(),
    )
    op.create_index('ix_questions_quiz_id', 'questions', ['quiz_id'])

    op.create_table(
        'answer_options',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('question_id', sa.Integer, sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('choice_index', sa.Integer, nullable=False),
        sa.Column('option_text', sa.String(500), nullable=False),
        sa.Column('is_correct', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('correct_order', sa.Integer, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('question_id', 'choice_index', name='uq_answer_options_question_choice'),
    )
    op.create_index('ix_answer_options_question_id', 'answer_options', ['question_id'])

    op.create_table(
        'scores',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('quiz_id', sa.Integer, sa.ForeignKey('quizzes.id', ondelete='SET NULL'), nullable=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('score', sa.Integer, nullable=False),
        sa.Column('max_score', sa.Integer, nullable=False),
        sa.Column('time_taken', sa.Integer, nullable=False, server_default='0'),
        sa.Column('date_played', sa.DateTime(timezone=True), server_default=sa.func.now()),
        *_timestamps(),
    )
    op.create_index('ix_scores_quiz_id', 'scores', ['quiz_id'])
    op.create_index('ix_scores_user_id', 'scores', ['user_id'])


def downgrade() -> None:
    op.drop_table('scores')
    op.drop_table('answer_options')
    op.drop_table('questions')
    op.drop_table('quizzes')
    op.drop_table('user_pin_logs')
    op.drop_table('users')
    op.drop_table('pin_codes')
    op.drop_table('subjects')
    op.drop_table('classes')
    op.drop_table('establishments')
