from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..errors import UnsupportedOperation


class ExamStore(ABC):
    """
    Storage port used by the routers and services.

    Records are plain JSON-shaped dicts with camelCase keys:
    exams carry examId, pin, title, description, settings, questions, createdAt, updatedAt;
    results carry resultId, examId, student, totals, responses, submittedAt.
    Lookups return None when nothing matches; I/O failures raise StorageError.
    """

    supports_delete = False

    async def startup(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    @abstractmethod
    async def list_exams(self) -> List[dict]:
        ...

    @abstractmethod
    async def get_exam(self, exam_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def get_exam_by_pin(self, pin: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def pin_exists(self, pin: str) -> bool:
        ...

    @abstractmethod
    async def create_exam(self, record: dict) -> None:
        """Persist a new exam. Raises PinTaken if another exam already holds record['pin']."""

    @abstractmethod
    async def update_exam(self, exam_id: str, mutate: Callable[[dict], dict]) -> Optional[dict]:
        """Replace the stored exam with mutate(current) and return it, or None if it does not exist."""

    async def delete_exam(self, exam_id: str) -> bool:
        raise UnsupportedOperation("Deleting exams is not supported by this storage backend")

    @abstractmethod
    async def append_result(self, exam_id: str, record: dict) -> None:
        ...

    @abstractmethod
    async def list_results(self, exam_id: str) -> List[dict]:
        ...
