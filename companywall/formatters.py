# formatters.py
# -*- coding: utf-8 -*-

"""
Display helpers: CompanyRecord -> CLI text and flat rows for Excel export.
"""

from typing import Dict, List, Optional

from companywall.constants import SENTINEL, MSG_NO_DETAIL_INFO
from companywall.models import CompanyRecord, FinancialYear

RESULT_COLUMNS = [
    "Upit",
    "Naziv",
    "Puni naziv",
    "OIB",
    "MBS",
    "Adresa",
    "Osnovano",
    "Status",
    "Djelatnost",
    "Veličina",
    "Rating",
    "Blokada",
    "Telefoni",
    "Email",
    "Web",
    "Vlasnik",
    "Direktori",
    "Prihodi (zadnja god.)",
    "Dobit (zadnja god.)",
    "Zaposleni",
    "URL",
    "Greška",
]


def format_amount(value: float) -> str:
    """1234567.8 -> "1.234.567,80" (Croatian grouping)."""
    formatted = f"{value:,.2f}"
    return formatted.replace(",", "_").replace(".", ",").replace("_", ".")


def _text(value: Optional[str]) -> str:
    if not value or value == SENTINEL:
        return ""
    return value.strip()


def format_list(values: List[str], separator: str = ", ") -> str:
    return separator.join(v.strip() for v in values if v and v.strip())


def make_result_row(
    query: str,
    record: Optional[CompanyRecord] = None,
    error: Optional[str] = None
) -> Dict[str, str]:
    """
    One row of batch output. Every row has the same keys, empty when unknown.

    Args:
        query: Original query (required)
        record: Found record, if any
        error: Error message, if the lookup failed
    """
    row = {column: "" for column in RESULT_COLUMNS}
    row["Upit"] = query

    if error:
        row["Greška"] = error
        return row

    if record is None:
        row["Greška"] = "Nije pronađeno"
        return row

    latest: Optional[FinancialYear] = record.financials[0] if record.financials else None

    row["Naziv"] = record.name or ""
    row["Puni naziv"] = record.full_name or ""
    row["OIB"] = record.oib or ""
    row["MBS"] = _text(record.mbs)
    row["Adresa"] = _text(record.address)
    row["Osnovano"] = _text(record.founded)
    row["Status"] = _text(record.status)
    row["Djelatnost"] = _text(record.activity)
    row["Veličina"] = _text(record.size)
    row["Rating"] = _text(record.rating)
    row["Blokada"] = "Da" if record.blocked else "Ne"
    row["Telefoni"] = format_list(record.phones)
    row["Email"] = _text(record.email)
    row["Web"] = _text(record.website)
    row["Vlasnik"] = _text(record.owner)
    row["Direktori"] = format_list(record.directors)
    if latest:
        row["Prihodi (zadnja god.)"] = format_amount(latest.income)
        row["Dobit (zadnja god.)"] = format_amount(latest.profit)
        row["Zaposleni"] = str(int(latest.employees)) if latest.employees else ""
    row["URL"] = record.source_url or ""
    return row


def format_financials(financials: List[FinancialYear]) -> List[str]:
    lines = []
    for entry in financials:
        lines.append(
            f"  {entry.year}: prihodi {format_amount(entry.income)} EUR, "
            f"rashodi {format_amount(entry.expenses)} EUR, "
            f"rezultat {format_amount(entry.profit)} EUR, "
            f"radnika {int(entry.employees)}"
        )
    return lines


def format_company_details(record: CompanyRecord) -> str:
    """Multi-line summary of a record for the CLI."""
    lines = [f"{record.name}"]
    if record.full_name and record.full_name != record.name:
        lines.append(f"Puni naziv: {record.full_name}")

    fields = [
        ("OIB", record.oib),
        ("MBS", record.mbs),
        ("Adresa", record.address),
        ("Osnovano", record.founded),
        ("Status", record.status),
        ("Djelatnost", record.activity),
        ("Veličina", record.size),
        ("Rating", record.rating),
        ("Email", record.email),
        ("Web", record.website),
        ("Vlasnik", record.owner),
        ("Nekretnine", record.real_estate),
        ("Dug prema državi", record.tax_debt),
    ]
    for label, value in fields:
        if _text(value):
            lines.append(f"{label}: {value}")

    lines.append(f"Blokada: {'DA' if record.blocked else 'ne'}")

    if record.phones:
        lines.append(f"Telefoni: {format_list(record.phones)}")
    if record.directors:
        lines.append(f"Uprava: {format_list(record.directors)}")

    if record.bank_accounts:
        lines.append(f"Računi ({len(record.bank_accounts)}):")
        for account in record.bank_accounts:
            details = ", ".join(p for p in [account.bank, account.opened, account.status] if p)
            lines.append(f"  - {account.iban}" + (f" ({details})" if details else ""))

    if record.financials:
        lines.append("Financije:")
        lines.extend(format_financials(record.financials))

    if record.description:
        lines.append("")
        lines.append(record.description)

    return "\n".join(lines) if lines else MSG_NO_DETAIL_INFO
