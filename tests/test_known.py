from companywall.known import KNOWN_COMPANIES, match_known_company


def test_match_by_name_fragment():
    assert match_known_company("INFOBIP d.o.o.").oib == "29756659895"
    assert match_known_company("rimac technology").name == "RIMAC TECHNOLOGY d.o.o."


def test_match_folds_diacritics():
    assert match_known_company("KONČAR - Elektroindustrija") is KNOWN_COMPANIES["koncar"]


def test_match_by_oib():
    assert match_known_company("52822453835") is KNOWN_COMPANIES["rimac"]


def test_no_match():
    assert match_known_company("Podravka") is None
    assert match_known_company("12345678901") is None
    assert match_known_company("") is None


def test_reference_records_hold_invariants():
    for record in KNOWN_COMPANIES.values():
        assert len(record.oib) == 11 and record.oib.isdigit()
        assert record.mbs != record.oib
        years = [entry.year for entry in record.financials]
        assert years == sorted(years, reverse=True)
        assert all(entry.has_data() for entry in record.financials)
        assert len(record.phones) <= 5
