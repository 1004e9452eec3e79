"""
SQLAlchemy ORM Models for the SRS Database

Defines card scheduling state, the daily new-card counter, the review event
log and review flags.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CardSrs(Base):
    """
    Persistent scheduling state for a single card (user_id + word_id).
    """
    __tablename__ = 'card_srs'

    # Primary key: one row per learner and card
    user_id = Column(String(255), primary_key=True, nullable=False)
    word_id = Column(String(255), primary_key=True, nullable=False)

    repetitions = Column(Integer, nullable=False)
    ease = Column(Float, nullable=False)
    interval_days = Column(Integer, nullable=False)
    due_at = Column(DateTime(timezone=True), nullable=False)
    last_grade = Column(Integer, nullable=True)  # 0=AGAIN, 1=HARD, 2=GOOD, 3=EASY

    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<CardSrs({self.user_id}, {self.word_id}, due={self.due_at})>"


class DailyCounter(Base):
    """
    Number of new cards a learner introduced on a calendar date.
    """
    __tablename__ = 'daily_counter'

    user_id = Column(String(255), primary_key=True, nullable=False)
    date = Column(String(10), primary_key=True, nullable=False)  # YYYY-MM-DD
    new_introduced = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<DailyCounter({self.user_id}, {self.date}, {self.new_introduced})>"


class ReviewEvent(Base):
    """
    Log entry for a single graded review.

    Captures state before/after the review for analytics.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False)
    word_id = Column(String(255), nullable=False)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    grade = Column(Integer, nullable=False)
    was_new = Column(Boolean, nullable=False, default=False)

    # State before review (null for new cards)
    repetitions_before = Column(Integer, nullable=True)
    ease_before = Column(Float, nullable=True)
    interval_before = Column(Integer, nullable=True)

    # State after review
    repetitions_after = Column(Integer, nullable=False)
    ease_after = Column(Float, nullable=False)
    interval_after = Column(Integer, nullable=False)
    due_at_after = Column(DateTime(timezone=True), nullable=False)

    # Session context (optional, for analytics)
    session_id = Column(String(255), nullable=True)
    session_position = Column(Integer, nullable=True)
    mode = Column(String(50), nullable=True)  # "spaced_repetition", "linear", "random"

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.word_id}, grade={self.grade})>"


class ReviewFlag(Base):
    """
    A learner's "again"/"hard" bookmark on a word, one per word.
    """
    __tablename__ = 'review_flags'

    user_id = Column(String(255), primary_key=True, nullable=False)
    word_id = Column(String(255), primary_key=True, nullable=False)
    flag = Column(String(10), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<ReviewFlag({self.user_id}, {self.word_id}, {self.flag})>"
