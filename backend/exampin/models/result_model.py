from exampin.db import Base
from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship, backref


class ExamResult(Base):
    __tablename__ = "exam_results"

    # autoincrement primary key keeps insertion order for the result listing
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=False, unique=True)

    # DB-level ON DELETE CASCADE where the backend enforces it; the store also deletes explicitly
    exam_id = Column(String(32), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)

    student = Column(JSON, nullable=False, default=dict)
    totals = Column(JSON, nullable=False, default=dict)
    responses = Column(JSON, nullable=False, default=list)
    submitted_at = Column(DateTime, nullable=False)

    exam = relationship("Exam", backref=backref("results", passive_deletes=True))
