from fastapi import APIRouter, Depends
from starlette.responses import Response
import re

from ..config import Settings
from ..dependencies import get_store, get_app_settings, http_errors
from ..schemas.result_schema import ResultSubmit, ResultSet, SubmitResponse
from ..services.export_service import results_to_csv, results_to_xlsx
from ..services.result_service import submit_result
from ..storage.base import ExamStore

router = APIRouter(prefix="/results", tags=["Results"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(filename: str) -> dict:
    filename = re.sub(r"[^A-Za-z0-9_.-]", "_", filename)
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.post("", response_model=SubmitResponse)
async def create_result(
    payload: ResultSubmit,
    store: ExamStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    with http_errors("saving result"):
        result_id = await submit_result(store, payload, enforce_pin_check=settings.enforce_pin_check)
    return {"ok": True, "resultId": result_id}


@router.get("/{exam_id}", response_model=ResultSet)
async def get_results(exam_id: str, store: ExamStore = Depends(get_store)):
    with http_errors("reading results"):
        items = await store.list_results(exam_id)
    return {"examId": exam_id, "items": items}


@router.get("/{exam_id}/csv")
async def export_results_csv(
    exam_id: str,
    store: ExamStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    with http_errors("exporting results"):
        items = await store.list_results(exam_id)
        content = results_to_csv(items, bom=settings.csv_bom)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers=_attachment(f"results_{exam_id}.csv"),
    )


@router.get("/{exam_id}/xlsx")
async def export_results_xlsx(exam_id: str, store: ExamStore = Depends(get_store)):
    with http_errors("exporting results"):
        items = await store.list_results(exam_id)
        content = results_to_xlsx(items)
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=_attachment(f"results_{exam_id}.xlsx"))
