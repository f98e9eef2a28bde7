"""
Flat JSON file storage.

Layout under the data directory:
    exams/exam_<examId>.json       one exam document
    results/results_<examId>.json  list of submissions for that exam

A PIN -> examId index is rebuilt from the exam files at startup and kept up to
date on publish. Read-modify-write cycles are serialised per exam id, and PIN
checks plus the first write of a new exam happen under a single publish lock.
"""
from pathlib import Path
from typing import Callable, Dict, List, Optional
import asyncio
import json
import logging
import os
import re

from ..errors import ExamNotFound, PinTaken, StorageError
from ..services.exam_service import _sort_newest_first
from .base import ExamStore

logger = logging.getLogger(__name__)

SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class FileExamStore(ExamStore):

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.exams_dir = self.data_dir / "exams"
        self.results_dir = self.data_dir / "results"
        self._pin_index: Dict[str, str] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._publish_lock = asyncio.Lock()

    async def startup(self) -> None:
        try:
            self.exams_dir.mkdir(parents=True, exist_ok=True)
            self.results_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self.data_dir}") from e
        self._rebuild_pin_index()
        logger.info("File store ready at %s (%d exams)", self.data_dir, len(self._pin_index))

    def _rebuild_pin_index(self) -> None:
        self._pin_index = {}
        for record in self._read_all_exams():
            pin = record.get("pin")
            exam_id = record.get("examId")
            if not pin or not exam_id:
                continue
            if pin in self._pin_index:
                logger.warning("Duplicate PIN %s in exams %s and %s; keeping the first", pin, self._pin_index[pin], exam_id)
                continue
            self._pin_index[pin] = exam_id

    def _lock_for(self, exam_id: str) -> asyncio.Lock:
        lock = self._locks.get(exam_id)
        if lock is None:
            lock = self._locks[exam_id] = asyncio.Lock()
        return lock

    def _exam_path(self, exam_id: str) -> Optional[Path]:
        # ids end up in file names, so anything outside the safe alphabet is treated as unknown
        if not SAFE_ID_RE.match(exam_id or ""):
            return None
        return self.exams_dir / f"exam_{exam_id}.json"

    def _results_path(self, exam_id: str) -> Optional[Path]:
        if not SAFE_ID_RE.match(exam_id or ""):
            return None
        return self.results_dir / f"results_{exam_id}.json"

    def _read_json(self, path: Path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {path.name}") from e

    def _write_json(self, path: Path, data) -> None:
        tmp = path.with_name(path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError(f"Cannot write {path.name}") from e

    def _read_all_exams(self) -> List[dict]:
        records = []
        for path in sorted(self.exams_dir.glob("exam_*.json")):
            try:
                records.append(self._read_json(path))
            except StorageError:
                logger.exception("Skipping unreadable exam file %s", path)
        return records

    # file I/O below runs in worker threads
    async def list_exams(self) -> List[dict]:
        return _sort_newest_first(await asyncio.to_thread(self._read_all_exams))

    async def get_exam(self, exam_id: str) -> Optional[dict]:
        path = self._exam_path(exam_id)
        if path is None or not path.exists():
            return None
        return await asyncio.to_thread(self._read_json, path)

    async def get_exam_by_pin(self, pin: str) -> Optional[dict]:
        exam_id = self._pin_index.get(pin)
        if exam_id is None:
            return None
        return await self.get_exam(exam_id)

    async def pin_exists(self, pin: str) -> bool:
        return pin in self._pin_index

    async def create_exam(self, record: dict) -> None:
        path = self._exam_path(record["examId"])
        if path is None:
            raise StorageError(f"Invalid exam id {record['examId']!r}")
        async with self._publish_lock:
            if record["pin"] in self._pin_index:
                raise PinTaken()
            await asyncio.to_thread(self._write_json, path, record)
            self._pin_index[record["pin"]] = record["examId"]

    async def update_exam(self, exam_id: str, mutate: Callable[[dict], dict]) -> Optional[dict]:
        path = self._exam_path(exam_id)
        # locks are only created for exams that exist on disk
        if path is None or not path.exists():
            return None
        async with self._lock_for(exam_id):
            if not path.exists():
                return None
            updated = mutate(await asyncio.to_thread(self._read_json, path))
            await asyncio.to_thread(self._write_json, path, updated)
            return updated

    async def append_result(self, exam_id: str, record: dict) -> None:
        path = self._results_path(exam_id)
        if path is None:
            raise StorageError(f"Invalid exam id {exam_id!r}")
        if not self._exam_path(exam_id).exists():
            raise ExamNotFound()
        async with self._lock_for(exam_id):
            results = await asyncio.to_thread(self._read_json, path) if path.exists() else []
            results.append(record)
            await asyncio.to_thread(self._write_json, path, results)

    async def list_results(self, exam_id: str) -> List[dict]:
        path = self._results_path(exam_id)
        if path is None or not path.exists():
            return []
        return await asyncio.to_thread(self._read_json, path)
