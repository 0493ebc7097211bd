from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from .session import Base


class QuizAttempt(Base):
    """First submitted result set for a user and quiz version."""
    __tablename__ = "quiz_attempts"

    # Composite primary key makes the first insert win
    version = Column(String(64), primary_key=True)
    fid = Column(String(64), primary_key=True)
    results = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
