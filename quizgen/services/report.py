from __future__ import annotations
import io
from typing import Any, Dict, List

import pandas as pd

from quizgen.errors import AssemblyError
from quizgen.services.contracts import DescriptiveItem

MCQ_SHEET = "MCQ Questions"
DESCRIPTIVE_SHEET = "Descriptive Questions"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_sheets(
    mcq_rows: List[Dict[str, Any]],
    descriptive_items: List[DescriptiveItem],
) -> Dict[str, pd.DataFrame]:
    """Sheet name -> frame, skipping kinds with no records.

    Columns follow first-seen key order across the rows.
    """
    sheets: Dict[str, pd.DataFrame] = {}
    if mcq_rows:
        sheets[MCQ_SHEET] = pd.DataFrame(mcq_rows)
    if descriptive_items:
        sheets[DESCRIPTIVE_SHEET] = pd.DataFrame(
            [item.to_row() for item in descriptive_items]
        )
    return sheets


def build_spreadsheet(
    mcq_rows: List[Dict[str, Any]],
    descriptive_items: List[DescriptiveItem],
) -> bytes:
    """Encode the sheets as xlsx. An empty workbook cannot be encoded and raises AssemblyError."""
    sheets = build_sheets(mcq_rows, descriptive_items)
    output = io.BytesIO()
    try:
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            for name, frame in sheets.items():
                frame.to_excel(writer, index=False, sheet_name=name)
    except Exception as e:
        # openpyxl refuses to save a workbook without any visible sheet
        raise AssemblyError(f"failed to encode workbook with sheets {list(sheets)}: {e}") from e
    return output.getvalue()
