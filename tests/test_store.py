import json

from companywall.models import BankAccount, CompanyRecord, FinancialYear
from companywall.store import FileDocumentStore, MemoryDocumentStore, ResultCache


def make_record(oib="29756659895", name="INFOBIP d.o.o."):
    return CompanyRecord(
        name=name,
        oib=oib,
        mbs="130004106",
        address="Istarska 157, Vodnjan",
        phones=["052635826"],
        phone="052635826",
        directors=["Silvio Kutić"],
        financials=[FinancialYear(year=2024, income=1000.5, employees=10)],
        bank_accounts=[BankAccount(iban="HR1723600001101234565", opened="12.03.2015.", status="Aktivan")],
        source_url="https://www.companywall.hr/tvrtka/infobip-doo/MMBBBB",
    )


class FailingStore:
    def find(self, collection, filters):
        return []

    def create(self, collection, document):
        raise IOError("disk full")


class BrokenReadStore:
    def find(self, collection, filters):
        raise RuntimeError("offline")

    def create(self, collection, document):
        return document


def test_cache_is_idempotent():
    store = MemoryDocumentStore()
    cache = ResultCache(store)
    record = make_record()

    assert cache.cache_if_absent(record) is True
    assert cache.cache_if_absent(record) is False
    assert store.count("companies") == 1


def test_cache_distinct_oibs():
    store = MemoryDocumentStore()
    cache = ResultCache(store)

    cache.cache_if_absent(make_record())
    cache.cache_if_absent(make_record(oib="52822453835", name="RIMAC TECHNOLOGY d.o.o."))

    assert store.count("companies") == 2


def test_cache_write_failure_is_swallowed(caplog):
    cache = ResultCache(FailingStore())

    assert cache.cache_if_absent(make_record()) is False
    assert "Failed to write record" in caplog.text


def test_cache_read_failure_returns_none():
    assert ResultCache(BrokenReadStore()).get("29756659895") is None


def test_cache_get_round_trip():
    cache = ResultCache(MemoryDocumentStore())
    record = make_record()
    cache.cache_if_absent(record)

    assert cache.get(record.oib) == record
    assert cache.get("12345678901") is None


def test_memory_store_assigns_ids():
    store = MemoryDocumentStore()
    created = store.create("companies", {"oib": "1"})

    assert created["_id"]
    assert store.find("companies", {"oib": "1"})[0]["_id"] == created["_id"]
    assert store.find("companies", {"oib": "2"}) == []
    assert store.find("other", {}) == []


def test_file_store_persists_documents(tmp_path):
    store = FileDocumentStore(str(tmp_path))
    cache = ResultCache(store)
    record = make_record()

    assert cache.cache_if_absent(record) is True

    files = list((tmp_path / "companies").glob("*.json"))
    assert len(files) == 1
    document = json.loads(files[0].read_text(encoding="utf-8"))
    assert document["oib"] == record.oib
    assert document["fullName"] == record.full_name
    assert "_created_at" in document

    reopened = ResultCache(FileDocumentStore(str(tmp_path)))
    assert reopened.get(record.oib) == record
    assert reopened.cache_if_absent(record) is False


def test_file_store_skips_unreadable_documents(tmp_path):
    store = FileDocumentStore(str(tmp_path))
    (tmp_path / "companies").mkdir(exist_ok=True)
    (tmp_path / "companies" / "broken.json").write_text("{", encoding="utf-8")
    store.create("companies", {"oib": "1"})

    assert len(store.find("companies", {})) == 1


def test_file_store_clear(tmp_path):
    store = FileDocumentStore(str(tmp_path))
    store.create("companies", {"oib": "1"})
    store.create("companies", {"oib": "2"})

    assert store.clear("companies") == 2
    assert store.find("companies", {}) == []
