# models.py
# -*- coding: utf-8 -*-

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


@dataclass(frozen=True)
class FinancialYear:
    """One year of the financial summary block"""
    year: int
    income: float = 0.0
    expenses: float = 0.0
    profit: float = 0.0
    employees: float = 0.0

    def has_data(self) -> bool:
        return any([self.income, self.expenses, self.profit, self.employees])


@dataclass(frozen=True)
class AverageSalary:
    year: int
    salary: float


@dataclass(frozen=True)
class BankAccount:
    iban: str
    opened: str = ""
    bank: str = ""
    status: str = ""
    closed: Optional[str] = None


@dataclass(frozen=True)
class CompanyRecord:
    """
    Company profile scraped from companywall.hr.

    Built once per search and never changed afterwards. Text fields use "-"
    when the page did not reveal a value. `oib` is the natural key used by
    the document store.
    """
    name: str
    oib: str
    full_name: str = ""
    mbs: str = "-"
    address: str = "-"
    founded: str = "-"
    status: str = "-"
    activity: str = "-"
    size: str = "-"
    rating: str = "-"
    blocked: bool = False
    phone: str = "-"
    phones: List[str] = field(default_factory=list)
    email: str = "-"
    website: str = "-"
    owner: str = "-"
    directors: List[str] = field(default_factory=list)
    financials: List[FinancialYear] = field(default_factory=list)
    description: str = ""
    bank_accounts: List[BankAccount] = field(default_factory=list)
    real_estate: str = "-"
    tax_debt: str = "-"
    average_salary: List[AverageSalary] = field(default_factory=list)
    source_url: Optional[str] = None

    def __post_init__(self):
        if not self.full_name:
            object.__setattr__(self, "full_name", self.name)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise with the field names used by the `companies` collection."""
        return {
            "name": self.name,
            "fullName": self.full_name,
            "oib": self.oib,
            "mbs": self.mbs,
            "address": self.address,
            "founded": self.founded,
            "status": self.status,
            "activity": self.activity,
            "size": self.size,
            "rating": self.rating,
            "blocked": self.blocked,
            "phone": self.phone,
            "phones": list(self.phones),
            "email": self.email,
            "website": self.website,
            "owner": self.owner,
            "directors": list(self.directors),
            "financials": [
                {
                    "year": f.year,
                    "income": f.income,
                    "expenses": f.expenses,
                    "profit": f.profit,
                    "employees": f.employees,
                }
                for f in self.financials
            ],
            "description": self.description,
            "bankAccounts": [
                {
                    "iban": a.iban,
                    "opened": a.opened,
                    "bank": a.bank,
                    "status": a.status,
                    "closed": a.closed,
                }
                for a in self.bank_accounts
            ],
            "realEstate": self.real_estate,
            "taxDebt": self.tax_debt,
            "averageSalary": [{"year": s.year, "salary": s.salary} for s in self.average_salary],
            "sourceUrl": self.source_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompanyRecord":
        return cls(
            name=data.get("name") or "",
            oib=data.get("oib") or "",
            full_name=data.get("fullName") or "",
            mbs=data.get("mbs") or "-",
            address=data.get("address") or "-",
            founded=data.get("founded") or "-",
            status=data.get("status") or "-",
            activity=data.get("activity") or "-",
            size=data.get("size") or "-",
            rating=data.get("rating") or "-",
            blocked=bool(data.get("blocked", False)),
            phone=data.get("phone") or "-",
            phones=list(data.get("phones") or []),
            email=data.get("email") or "-",
            website=data.get("website") or "-",
            owner=data.get("owner") or "-",
            directors=list(data.get("directors") or []),
            financials=[
                FinancialYear(
                    year=int(f["year"]),
                    income=f.get("income", 0.0),
                    expenses=f.get("expenses", 0.0),
                    profit=f.get("profit", 0.0),
                    employees=f.get("employees", 0.0),
                )
                for f in data.get("financials") or []
            ],
            description=data.get("description") or "",
            bank_accounts=[
                BankAccount(
                    iban=a["iban"],
                    opened=a.get("opened", ""),
                    bank=a.get("bank", ""),
                    status=a.get("status", ""),
                    closed=a.get("closed"),
                )
                for a in data.get("bankAccounts") or []
            ],
            real_estate=data.get("realEstate") or "-",
            tax_debt=data.get("taxDebt") or "-",
            average_salary=[
                AverageSalary(year=int(s["year"]), salary=s["salary"])
                for s in data.get("averageSalary") or []
            ],
            source_url=data.get("sourceUrl"),
        )
