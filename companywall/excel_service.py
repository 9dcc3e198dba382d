# excel_service.py
# -*- coding: utf-8 -*-

"""
Excel input/output for batch lookups.
"""

import logging
from typing import List, Optional, Tuple, Dict, Any

from openpyxl import load_workbook, Workbook
from openpyxl.utils import get_column_letter

from companywall.utils import clean_oib, is_oib, validate_excel_file
from companywall.exceptions import FileError, ValidationError

logger = logging.getLogger(__name__)

OIB_KEYWORDS = ["oib", "osobni identifikacijski broj", "porezni broj"]
NAME_KEYWORDS = ["naziv tvrtke", "naziv", "tvrtka", "company name", "company", "name"]
EXCLUDED_KEYWORDS = ["kontakt", "osoba", "contact", "primatelj"]


def detect_query_column(headers: List[str]) -> Tuple[Optional[int], Optional[str]]:
    """
    Find the column holding OIBs or company names from the header row.

    OIB columns win over name columns.

    Returns:
        (column_idx, column_name), or (None, None) when nothing matches
    """
    for keywords in (OIB_KEYWORDS, NAME_KEYWORDS):
        for idx, header in enumerate(headers):
            if not header:
                continue
            header_str = str(header).strip()
            header_lower = header_str.lower()
            if any(exclude in header_lower for exclude in EXCLUDED_KEYWORDS):
                continue
            if any(keyword in header_lower for keyword in keywords):
                return idx, header_str
    return None, None


def read_queries_from_excel(
    file_path: str,
    query_column_idx: Optional[int] = None
) -> Tuple[List[str], int, Optional[str]]:
    """
    Read OIBs or company names from an Excel file.

    Args:
        file_path: Excel file
        query_column_idx: 0-based column; auto-detected from headers when None

    Returns:
        (queries, column_idx, column_name), queries de-duplicated in file order

    Raises:
        FileError: If the file cannot be read
        ValidationError: If no query column can be found
    """
    validated_path = validate_excel_file(file_path)

    try:
        wb = load_workbook(validated_path, data_only=True, read_only=True)
        ws = wb.active
    except Exception as e:
        raise FileError(f"Cannot open Excel file: {e}", file_path=str(validated_path))

    try:
        rows = ws.iter_rows(values_only=True)
        header_row = next(rows, None)
        headers = [str(cell) if cell is not None else "" for cell in (header_row or [])]

        if query_column_idx is None:
            query_column_idx, column_name = detect_query_column(headers)
            if query_column_idx is None:
                raise ValidationError("No OIB or company name column found", field="query_column_idx")
        else:
            if query_column_idx < 0 or query_column_idx >= len(headers):
                raise ValidationError(f"Invalid column index: {query_column_idx}", field="query_column_idx")
            column_name = headers[query_column_idx]

        queries: List[str] = []
        seen = set()
        for row in rows:
            if query_column_idx >= len(row) or row[query_column_idx] is None:
                continue
            value_str = str(row[query_column_idx]).strip()
            if not value_str:
                continue

            cleaned = clean_oib(value_str)
            if cleaned and cleaned == value_str.replace(" ", "").replace("-", ""):
                if not is_oib(cleaned):
                    logger.warning(f"Skipping invalid OIB ({len(cleaned)} digits): '{value_str}'")
                    continue
                value_str = cleaned

            if value_str not in seen:
                seen.add(value_str)
                queries.append(value_str)
    finally:
        wb.close()

    logger.info(f"Read {len(queries)} queries from column '{column_name}' of {validated_path}")
    return queries, query_column_idx, column_name


def export_results_to_excel(
    data: List[Dict[str, Any]],
    file_path: str,
    metadata: Optional[Dict[str, Any]] = None
) -> None:
    """
    Write result rows to an Excel file.

    Args:
        data: Rows with identical keys (see formatters.make_result_row)
        file_path: Output .xlsx path
        metadata: Optional {"timestamp", "source", "count"} block written above the table

    Raises:
        ValueError: If data is empty
        FileError: If the file cannot be written
    """
    if not data:
        raise ValueError("No data to export")

    try:
        wb = Workbook()
        ws = wb.active
        ws.title = "Rezultati"

        row = 1
        if metadata:
            for key, label in (("timestamp", "Vrijeme izvoza:"), ("source", "Izvor:"), ("count", "Broj rezultata:")):
                if key in metadata:
                    ws.cell(row=row, column=1, value=label)
                    ws.cell(row=row, column=2, value=metadata[key])
                    row += 1
            row += 1

        headers = list(data[0].keys())
        for col_idx, header in enumerate(headers, 1):
            ws.cell(row=row, column=col_idx, value=header)
            ws.column_dimensions[get_column_letter(col_idx)].width = 22

        for row_idx, row_data in enumerate(data, row + 1):
            for col_idx, header in enumerate(headers, 1):
                ws.cell(row=row_idx, column=col_idx, value=row_data.get(header, ""))

        wb.save(file_path)
    except OSError as e:
        raise FileError(f"Cannot write Excel file: {e}", file_path=file_path)

    logger.info(f"Exported {len(data)} rows to {file_path}")
