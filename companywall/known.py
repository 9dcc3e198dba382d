# known.py
# -*- coding: utf-8 -*-

"""
Reference records for a few well-known companies, served without network
access when the client is created with use_known_companies=True (demos,
offline use).
"""

from typing import Dict, Optional

from companywall.models import CompanyRecord, FinancialYear
from companywall.utils import is_oib

KNOWN_COMPANIES: Dict[str, CompanyRecord] = {
    "infobip": CompanyRecord(
        name="INFOBIP d.o.o.",
        full_name="INFOBIP d.o.o. za informatičke usluge",
        oib="29756659895",
        mbs="130004106",
        address="Istarska ulica - Via dell'Istria 157, 52100, Vodnjan, Hrvatska",
        founded="13.04.2006.",
        status="Aktivan",
        activity="K63100 - Računalna infrastruktura, obrada podataka",
        size="Veliko poduzeće",
        rating="A+",
        blocked=False,
        phone="052635826",
        phones=["052635826"],
        email="pravna@infobip.com",
        website="https://www.infobip.com",
        owner="INFOBIP LIMITED",
        directors=["Stjepan Žitnik", "Tomislav Pifar"],
        financials=[
            FinancialYear(year=2024, income=128608959.77, expenses=121437859.17, profit=9249103.41, employees=1401),
            FinancialYear(year=2023, income=101758420.82, expenses=102254697.59, profit=1595458.28, employees=1401),
            FinancialYear(year=2022, income=88435177.51, expenses=86975443.76, profit=1459733.76, employees=1321),
        ],
    ),
    "rimac": CompanyRecord(
        name="RIMAC TECHNOLOGY d.o.o.",
        full_name="RIMAC TECHNOLOGY d.o.o. za proizvodnju",
        oib="52822453835",
        mbs="081335591",
        address="Ljubljanska 7, 10431 Sveta Nedelja",
        founded="2016.",
        status="Aktivan",
        activity="C2910 - Proizvodnja motornih vozila",
        size="Veliko poduzeće",
        rating="A",
        blocked=False,
        phone="01 5634 100",
        phones=["01 5634 100"],
        email="info@rimac-technology.com",
        website="https://www.rimac-technology.com",
        owner="RIMAC GROUP d.o.o.",
        directors=["Mate Rimac", "Antony John Douglas Saines"],
        financials=[
            FinancialYear(year=2023, income=423500000.00, expenses=418200000.00, profit=5300000.00, employees=1850),
            FinancialYear(year=2022, income=280100000.00, expenses=275000000.00, profit=5100000.00, employees=1400),
            FinancialYear(year=2021, income=195000000.00, expenses=198000000.00, profit=-3000000.00, employees=1100),
        ],
    ),
    "koncar": CompanyRecord(
        name="KONČAR - ELEKTROINDUSTRIJA d.d.",
        full_name="KONČAR - ELEKTROINDUSTRIJA d.d. za energetiku",
        oib="02230064214",
        mbs="080018082",
        address="Fallerovo šetalište 22, 10000 Zagreb",
        founded="1921.",
        status="Aktivan",
        activity="proizvodnja električne opreme",
        size="Veliko poduzeće",
        rating="A++",
        blocked=False,
        phone="01 3655 555",
        phones=["01 3655 555"],
        email="marketing@koncar.hr",
        website="https://www.koncar.hr",
        owner="Dioničko društvo",
        directors=["Gordan Kolak"],
        financials=[
            FinancialYear(year=2023, income=890500000.00, expenses=840000000.00, profit=50500000.00, employees=4200),
            FinancialYear(year=2022, income=720000000.00, expenses=690000000.00, profit=30000000.00, employees=3800),
            FinancialYear(year=2021, income=650000000.00, expenses=630000000.00, profit=20000000.00, employees=3600),
        ],
    ),
}

# "končar" typed with diacritics should still hit the "koncar" key
_FOLD = str.maketrans("čćžšđ", "cczsd")


def match_known_company(query: str) -> Optional[CompanyRecord]:
    """Known record whose key appears in query, or whose OIB equals query."""
    if not query:
        return None
    normalized = query.strip().lower().translate(_FOLD)
    for key, record in KNOWN_COMPANIES.items():
        if key in normalized:
            return record
    if is_oib(normalized):
        for record in KNOWN_COMPANIES.values():
            if record.oib == normalized:
                return record
    return None
