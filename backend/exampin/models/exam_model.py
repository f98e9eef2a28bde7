from exampin.db import Base


"""
Exams table
| Column | Type | Notes |
| :--- | :--- | :--- |
| `id` | VARCHAR(32) | Primary Key, generated hex id |
| `pin` | VARCHAR(6) | Unique, 6 digits, immutable |
| `title` | VARCHAR | |
| `description` | VARCHAR | |
| `settings` | JSON | showScore / shuffle / time |
| `questions` | JSON | Ordered list of sanitized questions |
| `created_at` | TIMESTAMP | UTC |
| `updated_at` | TIMESTAMP | UTC, refreshed on update |
"""

from sqlalchemy import Column, String, DateTime, JSON
from datetime import datetime, timezone


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Exam(Base):
    __tablename__ = "exams"

    id = Column(String(32), primary_key=True)
    pin = Column(String(6), nullable=False, unique=True, index=True)
    title = Column(String, nullable=False, default="")
    description = Column(String, nullable=False, default="")
    settings = Column(JSON, nullable=False, default=dict)
    questions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)
