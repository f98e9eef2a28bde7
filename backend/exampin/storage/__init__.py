from ..config import Settings
from .base import ExamStore
from .file_store import FileExamStore
from .sql_store import SqlExamStore


def build_store(settings: Settings) -> ExamStore:
    if settings.storage_backend == "database":
        return SqlExamStore(settings.database_url, echo=settings.database_echo)
    return FileExamStore(settings.data_dir)


__all__ = ["ExamStore", "FileExamStore", "SqlExamStore", "build_store"]
