# financials.py
# -*- coding: utf-8 -*-

"""
Financial summary extraction.

companywall.hr renders the yearly summary as a label followed by one value
per year ("Ukupni prihodi 128.608.959,77 101.758.420,82 88.435.177,51").
After the page is flattened to text, each row is recovered with regexes and
the values are matched to the year headers by position.
"""

import logging
import re
from typing import Dict, List, Optional

from companywall.config import MAX_FINANCIAL_YEARS
from companywall.models import AverageSalary, FinancialYear

logger = logging.getLogger(__name__)

YEAR_PATTERN = re.compile(r"(?<!\d)(20(?:0[1-9]|[1-9]\d))(?!\d)")

NUMBER = r"(-?\d[\d.,]*)"
CURRENCY = r"(?:\s*(?:EUR|€|kn|HRK))?"

# Row field -> label spellings, most common first. The abbreviated forms
# appear in the compact table layout.
ROW_LABELS: Dict[str, List[str]] = {
    "income": ["Ukupni prihodi", "Ukupan prihod", "Uk. prihodi", "Ukupni prih."],
    "expenses": ["Ukupni rashodi", "Ukupan rashod", "Uk. rashodi", "Ukupni rash."],
    "profit": ["Rezultat poslovanja", "Rez. poslovanja", "Rezultat posl.", "Dobit ili gubitak"],
    "employees": ["Prosječan broj radnika", "Prosječni broj radnika", "Prosj. broj radnika", "Prosječan br. radnika"],
}

SALARY_LABELS = ["Prosječna neto plaća", "Prosječna plaća", "Prosj. plaća"]


def parse_locale_number(value: Optional[str]) -> float:
    """
    Parse a number written in Croatian or plain notation.

    With both "." and "," present, "." groups thousands and "," is the
    decimal mark ("1.234,56"). With only "," it is the decimal mark. Several
    dots and no comma are thousands groups. Any other punctuation is dropped.

    Returns:
        Parsed value, 0.0 when nothing numeric is left
    """
    if not value:
        return 0.0

    clean = value.strip()
    if "." in clean and "," in clean:
        clean = clean.replace(".", "").replace(",", ".")
    elif "," in clean:
        head, _, tail = clean.rpartition(",")
        clean = head.replace(",", "") + "." + tail
    elif clean.count(".") > 1:
        clean = clean.replace(".", "")

    negative = clean.lstrip().startswith("-")
    clean = re.sub(r"[^\d.]", "", clean)
    if not clean or clean == ".":
        return 0.0
    try:
        number = float(clean)
    except ValueError:
        logger.debug(f"[PARSING] Cannot parse number: {value!r}")
        return 0.0
    return -number if negative else number


def extract_years(text: str) -> List[int]:
    """Distinct 2001-2099 tokens, most recent first."""
    return sorted({int(m) for m in YEAR_PATTERN.findall(text or "")}, reverse=True)


def _label_regex(label: str) -> str:
    parts = [re.escape(word) for word in label.split()]
    return r"\s+".join(parts)


def _row_shapes(label: str) -> List[re.Pattern]:
    """Three regex shapes for a row, from strict to forgiving."""
    lbl = _label_regex(label)
    tight = re.compile(lbl + r"\s" + NUMBER + r" " + NUMBER + r" " + NUMBER, re.I)
    loose = re.compile(
        lbl + r"[^\d\n-]{0,20}?" + NUMBER + CURRENCY + r"\s+" + NUMBER + CURRENCY + r"\s+" + NUMBER,
        re.I,
    )
    multiline = re.compile(
        lbl + r"[^\d-]{0,80}?" + NUMBER + r"[^\d-]{0,40}?" + NUMBER + r"[^\d-]{0,40}?" + NUMBER,
        re.I | re.S,
    )
    return [tight, loose, multiline]


def extract_row(text: str, labels: List[str]) -> Optional[List[float]]:
    """
    Find the three values following one of labels.

    A match where every value is zero is skipped; such blocks show up as
    empty placeholders before the real table.

    Returns:
        Three parsed values, or None when no shape produced a usable row
    """
    for label in labels:
        for shape in _row_shapes(label):
            for match in shape.finditer(text):
                values = [parse_locale_number(g) for g in match.groups()]
                if any(values):
                    logger.debug(f"[PARSING] Financial row '{label}' matched: {values}")
                    return values
    return None


def extract_financials(text: str) -> List[FinancialYear]:
    """
    Rebuild up to three years of income, expenses, profit and headcount.

    Returns:
        One FinancialYear per year that has at least one non-zero value,
        most recent year first
    """
    if not text:
        return []

    years = extract_years(text)[:MAX_FINANCIAL_YEARS]
    if not years:
        return []

    rows = {name: extract_row(text, labels) for name, labels in ROW_LABELS.items()}
    if not any(rows.values()):
        logger.debug("[PARSING] No financial rows found")
        return []

    series: List[FinancialYear] = []
    for idx, year in enumerate(years):
        values = {
            name: row[idx]
            for name, row in rows.items()
            if row is not None and idx < len(row)
        }
        if not values:
            continue
        entry = FinancialYear(year=year, **values)
        if entry.has_data():
            series.append(entry)

    series.sort(key=lambda f: f.year, reverse=True)
    logger.info(f"[PARSING] Financials: {len(series)} years ({[f.year for f in series]})")
    return series


def extract_average_salary(text: str) -> List[AverageSalary]:
    if not text:
        return []
    years = extract_years(text)[:MAX_FINANCIAL_YEARS]
    row = extract_row(text, SALARY_LABELS)
    if not years or not row:
        return []
    return [
        AverageSalary(year=year, salary=row[idx])
        for idx, year in enumerate(years)
        if idx < len(row) and row[idx]
    ]


def locate_financial_block(text: str, before: int = 300, after: int = 400) -> str:
    """
    Cut the part of the flattened page that holds the financial summary.

    Keeps a window before the first row label for the year headers and after
    the last row label for the values.
    """
    if not text:
        return ""

    positions = []
    for labels in list(ROW_LABELS.values()) + [SALARY_LABELS]:
        for label in labels:
            for match in re.finditer(_label_regex(label), text, re.I):
                positions.append((match.start(), match.end()))
    if not positions:
        return ""

    start = max(0, min(p[0] for p in positions) - before)
    end = min(len(text), max(p[1] for p in positions) + after)
    return text[start:end]
