"""Create lwlnow tables"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

NOW = sa.text("timezone('utc', now())")


def _uuid_pk() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _user_fk(ondelete: str = "CASCADE", nullable: bool = False, name: str = "user_id") -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("native_language", sa.String(length=20), server_default=sa.text("'english'"), nullable=True),
        sa.Column("target_language", sa.String(length=20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_roles",
        _uuid_pk(),
        _user_fk(),
        sa.Column("role", sa.String(length=20), server_default=sa.text("'user'"), nullable=False),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"], unique=False)

    op.create_table(
        "exercises",
        _uuid_pk(),
        _user_fk(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("language", sa.String(length=20), nullable=False),
        sa.Column("tags", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("audio_url", sa.String(length=1024), nullable=True),
        sa.Column("completion_count", sa.Integer(), server_default=sa.text("0"), nullable=True),
        sa.Column("is_completed", sa.Boolean(), server_default=sa.text("false"), nullable=True),
        sa.Column("archived", sa.Boolean(), server_default=sa.text("false"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_exercises_user_id", "exercises", ["user_id"], unique=False)
    op.create_index("ix_exercises_language", "exercises", ["language"], unique=False)
    op.create_index("ix_exercises_archived", "exercises", ["archived"], unique=False)

    op.create_table(
        "vocabulary",
        _uuid_pk(),
        _user_fk(),
        sa.Column("exercise_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("word", sa.String(length=255), nullable=False),
        sa.Column("language", sa.String(length=20), nullable=False),
        sa.Column("definition", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("example_sentence", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column("audio_url", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.UniqueConstraint("user_id", "word", "language", name="uq_vocabulary_user_word_language"),
    )
    op.create_index("ix_vocabulary_user_id", "vocabulary", ["user_id"], unique=False)
    op.create_index("ix_vocabulary_language", "vocabulary", ["language"], unique=False)

    op.create_table(
        "known_words",
        _uuid_pk(),
        _user_fk(),
        sa.Column("word", sa.String(length=255), nullable=False),
        sa.Column("language", sa.String(length=20), nullable=False),
        sa.Column("mastery_level", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column("review_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("correct_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("first_seen_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("last_reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_review_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.UniqueConstraint("user_id", "word", "language", name="uq_known_words_user_word_language"),
    )
    op.create_index("ix_known_words_user_id", "known_words", ["user_id"], unique=False)
    op.create_index("ix_known_words_language", "known_words", ["language"], unique=False)
    op.create_index("ix_known_words_next_review_date", "known_words", ["next_review_date"], unique=False)

    op.create_table(
        "sentence_mining_sessions",
        _uuid_pk(),
        _user_fk(),
        sa.Column("language", sa.String(length=20), nullable=False),
        sa.Column("difficulty_level", sa.String(length=20), server_default=sa.text("'beginner'"), nullable=False),
        sa.Column("exercise_types", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("total_exercises", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("correct_exercises", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("new_words_encountered", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("words_mastered", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("session_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_sentence_mining_sessions_user_id", "sentence_mining_sessions", ["user_id"], unique=False)
    op.create_index("ix_sentence_mining_sessions_language", "sentence_mining_sessions", ["language"], unique=False)
    op.create_index("ix_sentence_mining_sessions_created_at", "sentence_mining_sessions", ["created_at"], unique=False)

    op.create_table(
        "sentence_mining_exercises",
        _uuid_pk(),
        sa.Column(
            "session_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("sentence_mining_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("exercise_type", sa.String(length=20), server_default=sa.text("'cloze'"), nullable=False),
        sa.Column("sentence", sa.Text(), nullable=False),
        sa.Column("cloze_sentence", sa.Text(), nullable=True),
        sa.Column("translation", sa.Text(), nullable=True),
        sa.Column("target_words", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("unknown_words", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("difficulty_score", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("user_response", sa.Text(), nullable=True),
        sa.Column("is_correct", sa.Boolean(), nullable=True),
        sa.Column("hints_used", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("completion_time", sa.Integer(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index(
        "ix_sentence_mining_exercises_session_id", "sentence_mining_exercises", ["session_id"], unique=False
    )

    op.create_table(
        "bidirectional_exercises",
        _uuid_pk(),
        _user_fk(),
        sa.Column("original_sentence", sa.Text(), nullable=False),
        sa.Column("target_language", sa.String(length=20), nullable=False),
        sa.Column("support_language", sa.String(length=20), nullable=False),
        sa.Column("normal_translation", sa.Text(), nullable=True),
        sa.Column("literal_translation", sa.Text(), nullable=True),
        sa.Column("user_forward_translation", sa.Text(), nullable=True),
        sa.Column("user_back_translation", sa.Text(), nullable=True),
        sa.Column("reflection_notes", sa.Text(), nullable=True),
        sa.Column("original_audio_url", sa.String(length=1024), nullable=True),
        sa.Column("status", sa.String(length=20), server_default=sa.text("'learning'"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_bidirectional_exercises_user_id", "bidirectional_exercises", ["user_id"], unique=False)
    op.create_index(
        "ix_bidirectional_exercises_target_language", "bidirectional_exercises", ["target_language"], unique=False
    )
    op.create_index("ix_bidirectional_exercises_status", "bidirectional_exercises", ["status"], unique=False)

    op.create_table(
        "bidirectional_reviews",
        _uuid_pk(),
        sa.Column(
            "exercise_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("bidirectional_exercises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk(),
        sa.Column("review_type", sa.String(length=10), nullable=False),
        sa.Column("user_recall_attempt", sa.Text(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("review_round", sa.Integer(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_bidirectional_reviews_exercise_id", "bidirectional_reviews", ["exercise_id"], unique=False)
    op.create_index("ix_bidirectional_reviews_user_id", "bidirectional_reviews", ["user_id"], unique=False)
    op.create_index("ix_bidirectional_reviews_due_date", "bidirectional_reviews", ["due_date"], unique=False)

    op.create_table(
        "bidirectional_mastered_words",
        _uuid_pk(),
        _user_fk(),
        sa.Column(
            "exercise_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("bidirectional_exercises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("word", sa.String(length=255), nullable=False),
        sa.Column("language", sa.String(length=20), nullable=False),
        sa.Column("mastered_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.UniqueConstraint("user_id", "word", "language", name="uq_bidirectional_mastered_user_word"),
    )
    op.create_index(
        "ix_bidirectional_mastered_words_user_id", "bidirectional_mastered_words", ["user_id"], unique=False
    )

    op.create_table(
        "user_daily_activities",
        _uuid_pk(),
        _user_fk(),
        sa.Column("language", sa.String(length=20), nullable=False),
        sa.Column("activity_date", sa.Date(), nullable=False),
        sa.Column("activity_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("exercises_completed", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("words_mastered", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.UniqueConstraint("user_id", "language", "activity_date", name="uq_daily_activity_user_day"),
    )
    op.create_index("ix_user_daily_activities_user_id", "user_daily_activities", ["user_id"], unique=False)
    op.create_index(
        "ix_user_daily_activities_activity_date", "user_daily_activities", ["activity_date"], unique=False
    )

    op.create_table(
        "shadowing_exercises",
        _uuid_pk(),
        _user_fk(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("language", sa.String(length=20), nullable=False),
        sa.Column("sentences", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_shadowing_exercises_user_id", "shadowing_exercises", ["user_id"], unique=False)

    op.create_table(
        "shadowing_progress",
        _uuid_pk(),
        _user_fk(),
        sa.Column(
            "shadowing_exercise_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("shadowing_exercises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("current_sentence_index", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("completed_sentences", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_sentences", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("completion_percentage", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("last_practiced_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.UniqueConstraint("user_id", "shadowing_exercise_id", name="uq_shadowing_progress_user_exercise"),
    )
    op.create_index("ix_shadowing_progress_user_id", "shadowing_progress", ["user_id"], unique=False)

    op.create_table(
        "subscribers",
        _uuid_pk(),
        sa.Column("email", sa.String(length=255), nullable=False),
        _user_fk(ondelete="SET NULL", nullable=True),
        sa.Column("stripe_customer_id", sa.String(length=255), nullable=True),
        sa.Column("subscribed", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("subscription_tier", sa.String(length=20), server_default=sa.text("'free'"), nullable=True),
        sa.Column("subscription_status", sa.String(length=30), nullable=True),
        sa.Column("trial_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("subscription_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("canceled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("lifetime_access", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_subscribers_email", "subscribers", ["email"], unique=True)

    op.create_table(
        "promotional_banners",
        _uuid_pk(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("target_route", sa.String(length=255), server_default=sa.text("'/'"), nullable=False),
        sa.Column("banner_type", sa.String(length=30), nullable=True),
        sa.Column("button_text", sa.String(length=100), nullable=True),
        sa.Column("button_url", sa.String(length=1024), nullable=True),
        sa.Column("background_color", sa.String(length=30), nullable=True),
        sa.Column("text_color", sa.String(length=30), nullable=True),
        sa.Column("promo_code", sa.String(length=100), nullable=True),
        sa.Column("priority", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        _user_fk(ondelete="SET NULL", nullable=True, name="created_by"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_promotional_banners_target_route", "promotional_banners", ["target_route"], unique=False)

    op.create_table(
        "promo_code_usage",
        _uuid_pk(),
        sa.Column("promo_code", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        _user_fk(ondelete="SET NULL", nullable=True),
        sa.Column("stripe_session_id", sa.String(length=255), nullable=True),
        sa.Column("discount_amount", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_promo_code_usage_promo_code", "promo_code_usage", ["promo_code"], unique=False)
    op.create_index("ix_promo_code_usage_created_at", "promo_code_usage", ["created_at"], unique=False)

    op.create_table(
        "feedback",
        _uuid_pk(),
        sa.Column("name", sa.String(length=100), server_default=sa.text("'Anonymous'"), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_feedback_created_at", "feedback", ["created_at"], unique=False)

    op.create_table(
        "visitors",
        _uuid_pk(),
        sa.Column("visitor_id", sa.String(length=64), nullable=False),
        sa.Column("page", sa.String(length=512), nullable=False),
        sa.Column("referer", sa.Text(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    )
    op.create_index("ix_visitors_visitor_id", "visitors", ["visitor_id"], unique=False)
    op.create_index("ix_visitors_page", "visitors", ["page"], unique=False)
    op.create_index("ix_visitors_created_at", "visitors", ["created_at"], unique=False)

    op.create_table(
        "storage_buckets",
        _uuid_pk(),
        sa.Column("name", sa.String(length=63), nullable=False),
        sa.Column("public", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("file_size_limit", sa.BigInteger(), nullable=True),
        sa.Column("allowed_mime_types", postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW, nullable=True),
        sa.UniqueConstraint("name", name="uq_storage_buckets_name"),
    )


def downgrade() -> None:
    for table in (
        "storage_buckets",
        "visitors",
        "feedback",
        "promo_code_usage",
        "promotional_banners",
        "subscribers",
        "shadowing_progress",
        "shadowing_exercises",
        "user_daily_activities",
        "bidirectional_mastered_words",
        "bidirectional_reviews",
        "bidirectional_exercises",
        "sentence_mining_exercises",
        "sentence_mining_sessions",
        "known_words",
        "vocabulary",
        "exercises",
        "user_roles",
        "users",
    ):
        op.drop_table(table)
