import pytest
from bs4 import BeautifulSoup

from companywall import extractor
from companywall.exceptions import IdentifierMismatch, NotACompanyPage
from companywall.extractor import (
    detect_blocked,
    extract_bank_accounts,
    extract_company,
    extract_oib,
    extract_phones,
    find_labeled_value,
    first_candidate,
    flatten_text,
    normalize_phone,
    normalize_website,
    parse_company,
    parse_json_ld,
)

from conftest import DETAIL_HTML


def soup_of(html):
    return BeautifulSoup(html, "html.parser")


def test_first_candidate_short_circuits():
    called = []

    def empty():
        called.append("empty")
        return ""

    def hit():
        called.append("hit")
        return "value"

    def never():
        called.append("never")
        return "other"

    assert first_candidate([empty, hit, never]) == "value"
    assert called == ["empty", "hit"]
    assert first_candidate([empty]) == ""


def test_flatten_text_skips_scripts_and_comments():
    soup = soup_of("<div>Ilica <!-- skriveno --> 1<script>var x = 1;</script><style>p{}</style></div>")
    assert flatten_text(soup) == "Ilica 1"


def test_parse_json_ld_graph_and_lists():
    html = """
    <script type="application/ld+json">[{"@type": "BreadcrumbList"}, {"@type": ["Organization"], "name": "A"}]</script>
    <script type="application/ld+json">{"@graph": [{"@type": "LocalBusiness", "name": "B"}]}</script>
    <script type="application/ld+json">{not json</script>
    """
    orgs = parse_json_ld(soup_of(html))
    assert [org["name"] for org in orgs] == ["A", "B"]


def test_labeled_value_dt_dd():
    soup = soup_of("<dl><dt>MBS</dt><dd>080018082</dd></dl>")
    assert find_labeled_value(soup, "MBS") == "080018082"


def test_labeled_value_th_td():
    soup = soup_of("<table><tr><th>Djelatnost</th><td>Proizvodnja</td></tr></table>")
    assert find_labeled_value(soup, "Djelatnost") == "Proizvodnja"


def test_labeled_value_inline():
    soup = soup_of("<p>Adresa: Ilica 1, Zagreb</p>")
    assert find_labeled_value(soup, "Adresa") == "Ilica 1, Zagreb"


def test_labeled_value_next_sibling_text():
    soup = soup_of("<p><b>Sjedište</b> Ilica 1, Zagreb</p>")
    assert find_labeled_value(soup, "Sjedište") == "Ilica 1, Zagreb"


def test_labeled_value_parent_next_sibling():
    soup = soup_of("<div><span>Adresa</span></div><div>Ilica 1, Zagreb</div>")
    assert find_labeled_value(soup, "Adresa") == "Ilica 1, Zagreb"


def test_labeled_value_rejects_noise_and_swallowed_labels():
    assert find_labeled_value(soup_of("<dl><dt>Adresa</dt><dd>Prijavite se za više informacija</dd></dl>"), "Adresa") == ""
    assert find_labeled_value(soup_of("<dl><dt>Adresa</dt><dd>OIB 123 MBS 456</dd></dl>"), "Adresa") == ""


def test_oib_from_regex_over_text():
    soup = soup_of("<html><body><div>Podaci o tvrtki OIB: 12345678901 i ostalo</div></body></html>")
    text = flatten_text(soup)
    assert extract_oib(soup, text, []) == "12345678901"


def test_oib_from_json_ld_tax_id():
    html = '<script type="application/ld+json">{"@type": "Organization", "taxID": "HR12345678901"}</script><p>x</p>'
    soup = soup_of(html)
    assert extract_oib(soup, flatten_text(soup), parse_json_ld(soup)) == "12345678901"


def test_unlabeled_number_is_not_an_oib():
    soup = soup_of("<p>Identifikator 12345678901</p>")
    assert extract_oib(soup, flatten_text(soup), []) == ""


def test_page_only_mentioning_searched_oib_is_rejected():
    html = "<h1>DRUGA TVRTKA d.o.o.</h1><p>Povezana osoba: ACME 12345678901</p>"

    with pytest.raises(NotACompanyPage):
        parse_company(html, "12345678901")
    assert extract_company(html, "12345678901") is None


def test_parse_company_full_page():
    record = parse_company(DETAIL_HTML, "Infobip", source_url="https://www.companywall.hr/tvrtka/infobip-doo/MMBBBB")

    assert record.name == "INFOBIP d.o.o."
    assert record.full_name == "INFOBIP d.o.o. za informatičke usluge"
    assert record.oib == "29756659895"
    assert record.mbs == "130004106"
    assert record.address == "Istarska 157, 52215, Vodnjan"
    assert record.status == "Aktivan"
    assert record.activity == "Računalno programiranje"
    assert record.rating == "A+"
    assert record.blocked is False
    assert record.email == "info@infobip.com"
    assert record.website == "https://www.infobip.com"
    assert record.owner == "INFOBIP LIMITED"
    assert record.directors == ["Silvio Kutić"]
    assert record.founded == "-"
    assert record.size == "-"
    assert record.source_url.endswith("/MMBBBB")

    assert "052635826" in record.phones
    assert record.phone == record.phones[0]

    assert [entry.year for entry in record.financials] == [2024, 2023, 2022]
    assert record.financials[0].income == pytest.approx(128608959.77)
    assert record.financials[0].employees == 1401


def test_parse_company_matching_oib_query():
    record = parse_company(DETAIL_HTML, "29756659895")
    assert record.oib == "29756659895"


def test_oib_query_mismatch():
    with pytest.raises(IdentifierMismatch) as excinfo:
        parse_company(DETAIL_HTML, "12345678901")
    assert excinfo.value.expected == "12345678901"
    assert excinfo.value.found == "29756659895"
    assert extract_company(DETAIL_HTML, "12345678901") is None


def test_not_a_company_page():
    html = "<html><body><h1>Stranica nije pronađena</h1></body></html>"
    with pytest.raises(NotACompanyPage):
        parse_company(html, "Infobip")
    assert extract_company(html, "Infobip") is None


def test_oib_label_without_value_is_rejected():
    with pytest.raises(NotACompanyPage):
        parse_company("<p>OIB: nepoznat</p>", "Infobip")


def test_mbs_equal_to_oib_is_discarded():
    record = parse_company("<p>OIB: 12345678901</p><p>MBS: 12345678901</p>")
    assert record.oib == "12345678901"
    assert record.mbs == "-"


def test_minimal_page_uses_sentinels_and_query_name():
    record = parse_company("<p>OIB: 12345678901</p>", "Tvrtka d.o.o.")
    assert record.name == "Tvrtka d.o.o."
    assert record.full_name == "Tvrtka d.o.o."
    assert record.address == "-"
    assert record.email == "-"
    assert record.phones == []
    assert record.phone == "-"
    assert record.financials == []


def test_blocked_keyword():
    assert detect_blocked("Račun je blokiran od 01.02.2024.") is True
    assert detect_blocked("Tvrtka posluje normalno") is False


def test_negation_anywhere_wins():
    text = "Povijest: račun u blokadi 2019. godine. Trenutni status: Nije u blokadi"
    assert detect_blocked(text) is False


def test_normalize_phone():
    assert normalize_phone(" 01/2345-678 ") == "01/2345-678"
    assert normalize_phone("12 34") == ""


def test_phones_are_distinct_and_capped():
    numbers = "; ".join(f"01 2345 67{i}" for i in range(1, 8))
    html = f"<p>Pozovite {numbers}; 01/2345-671</p>"
    soup = soup_of(html)
    phones = extract_phones(soup, flatten_text(soup), [])

    assert len(phones) == 5
    digits = ["".join(c for c in p if c.isdigit()) for p in phones]
    assert len(set(digits)) == len(digits)
    assert all(len(d) >= 9 for d in digits)


def test_phones_skip_other_entities_oibs():
    soup = soup_of("<p>Vlasnik: HOLDING d.o.o. 01234567890</p><p>Tel. 01 2345 678</p>")
    phones = extract_phones(soup, flatten_text(soup), [])

    assert phones == ["01 2345 678"]


def test_phones_exclude_identifiers():
    soup = soup_of('<a href="tel:012345678">zovi</a>')
    assert extract_phones(soup, "", [], exclude=["012345678"]) == []


def test_normalize_website():
    assert normalize_website("www.infobip.com") == "https://www.infobip.com"
    assert normalize_website("https://www.companywall.hr/tvrtka/x") == ""
    assert normalize_website("https://www.facebook.com/infobip") == ""
    assert normalize_website("infobip") == ""


def test_bank_accounts():
    text = "Računi HR1723600001101234565 otvoren: 12.03.2015. Zagrebačka banka d.d. Aktivan"
    accounts = extract_bank_accounts(text)

    assert len(accounts) == 1
    account = accounts[0]
    assert account.iban == "HR1723600001101234565"
    assert account.opened == "12.03.2015."
    assert account.bank == "Zagrebačka banka d.d."
    assert account.status == "Aktivan"
    assert account.closed is None


def test_description_from_meta():
    html = '<meta name="description" content="  Vodeća   tvrtka. "><p>OIB: 12345678901</p>'
    record = parse_company(html)
    assert record.description == "Vodeća tvrtka."


def test_extractor_logs_rejections(caplog):
    caplog.set_level("INFO", logger=extractor.__name__)
    extract_company("<p>prazno</p>", source_url="https://example.test/x")
    assert "Rejected page" in caplog.text
