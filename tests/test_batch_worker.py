from companywall.batch_worker import BatchWorker
from companywall.exceptions import ValidationError
from companywall.known import KNOWN_COMPANIES


class FakeClient:
    def __init__(self):
        self.queries = []

    def search(self, term):
        self.queries.append(term)
        if term == "boom":
            raise RuntimeError("unexpected")
        if term == "":
            raise ValidationError("Empty query", field="term")
        return KNOWN_COMPANIES.get(term)


def test_processes_all_queries_in_order():
    client = FakeClient()
    worker = BatchWorker(client)
    progress = []
    rows_seen = []

    rows = worker.process_queries(
        ["infobip", "nepoznato", "rimac"],
        progress_callback=lambda idx, total, query: progress.append((idx, total, query)),
        result_callback=rows_seen.append,
    )

    assert [row["Upit"] for row in rows] == ["infobip", "nepoznato", "rimac"]
    assert rows[0]["OIB"] == "29756659895"
    assert rows[1]["Greška"] == "Nije pronađeno"
    assert progress == [(1, 3, "infobip"), (2, 3, "nepoznato"), (3, 3, "rimac")]
    assert rows_seen == rows
    assert worker.found == 2
    assert worker.is_cancelled is False


def test_errors_become_rows():
    errors = []
    worker = BatchWorker(FakeClient())

    rows = worker.process_queries(
        ["", "boom", "koncar"],
        error_callback=lambda query, exc: errors.append((query, type(exc).__name__)),
    )

    assert rows[0]["Greška"] == "Empty query"
    assert rows[1]["Greška"] == "unexpected"
    assert rows[2]["OIB"] == "02230064214"
    assert errors == [("", "ValidationError"), ("boom", "RuntimeError")]


def test_cancel_stops_before_next_query():
    client = FakeClient()
    worker = BatchWorker(client)
    done = []

    rows = worker.process_queries(
        ["infobip", "rimac", "koncar"],
        cancelled_callback=lambda: len(done) >= 1,
        result_callback=done.append,
    )

    assert len(rows) == 1
    assert client.queries == ["infobip"]
    assert worker.is_cancelled is True
