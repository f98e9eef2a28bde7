from io import BytesIO
from typing import Any, Dict, List
import pandas as pd

BOM = "\ufeff"
BASE_COLUMNS = ["Alumne", "Grup", "Puntuació", "Max", "Percent", "Data"]
SHEET_NAME = "Resultats"
NUMERIC_COLUMNS = ("Puntuació", "Max", "Percent")

CORRECT = "1"
INCORRECT = "0"
NOT_APPLICABLE = "-"


def _answer_cell(response: Any) -> str:
    flag = response.get("correct") if isinstance(response, dict) else None
    if flag is True:
        return CORRECT
    if flag is False:
        return INCORRECT
    return NOT_APPLICABLE


def _percent(score, max_score):
    # no percentage when max is zero (or missing)
    try:
        score = float(score or 0)
        max_score = float(max_score or 0)
    except (TypeError, ValueError):
        return None
    if max_score == 0:
        return None
    return round(score / max_score * 100, 1)


def build_results_frame(items: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    One row per submission: name, group, score, max, percent, date and one cell per answer.
    Answer columns go up to the widest submission; shorter rows are padded with "-".
    """
    width = max((len(item.get("responses") or []) for item in items), default=0)
    columns = BASE_COLUMNS + [f"Q{n}" for n in range(1, width + 1)]

    rows = []
    for item in items:
        student = item.get("student") or {}
        totals = item.get("totals") or {}
        responses = item.get("responses") or []
        cells = [_answer_cell(r) for r in responses]
        cells += [NOT_APPLICABLE] * (width - len(cells))
        rows.append([
            student.get("name", ""),
            student.get("group", ""),
            totals.get("score"),
            totals.get("max"),
            _percent(totals.get("score"), totals.get("max")),
            item.get("submittedAt", ""),
            *cells,
        ])

    frame = pd.DataFrame(rows, columns=columns)
    for col in NUMERIC_COLUMNS:
        frame[col] = pd.to_numeric(frame[col], errors="coerce")
    return frame


def _number_cell(value) -> str:
    # whole numbers without ".0", fractions at full precision
    if pd.isna(value):
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def results_to_csv(items: List[Dict[str, Any]], bom: bool = True) -> bytes:
    frame = build_results_frame(items)
    for col in NUMERIC_COLUMNS:
        frame[col] = frame[col].map(_number_cell)
    text = frame.to_csv(index=False, na_rep="", lineterminator="\n")
    if bom:
        text = BOM + text
    return text.encode("utf-8")


def results_to_xlsx(items: List[Dict[str, Any]]) -> bytes:
    buf = BytesIO()
    build_results_frame(items).to_excel(buf, index=False, sheet_name=SHEET_NAME, engine="openpyxl")
    return buf.getvalue()
