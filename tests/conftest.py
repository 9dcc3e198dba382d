import sys
from pathlib import Path
from urllib.parse import unquote

import pytest

# Ensure the `companywall` package is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


SEARCH_HTML = """
<html><body>
<nav><a href="/o-nama">O nama</a></nav>
<div class="results">
  <div class="result-item">
    <a href="/tvrtka/acme-doo/MMBAAA">ACME d.o.o.</a>
    <span>Zagreb, Ilica 1</span>
  </div>
  <div class="result-item">
    <a href="/tvrtka/infobip-doo/MMBBBB">INFOBIP d.o.o.</a>
    <span>Vodnjan, Istarska 157</span>
  </div>
</div>
</body></html>
"""

EMPTY_SEARCH_HTML = """
<html><body>
<nav><a href="/o-nama">O nama</a></nav>
<p>Nema rezultata za zadani upit. Pokušajte s drugim pojmom.</p>
</body></html>
"""

DETAIL_HTML = """
<html><head>
<title>INFOBIP d.o.o. | CompanyWall</title>
<meta property="og:title" content="INFOBIP d.o.o. za informatičke usluge | CompanyWall">
<script type="application/ld+json">
{"@context": "https://schema.org",
 "@graph": [
   {"@type": "WebPage", "name": "Infobip profil"},
   {"@type": "Organization",
    "name": "INFOBIP d.o.o.",
    "legalName": "INFOBIP d.o.o. za informatičke usluge",
    "taxID": "HR29756659895",
    "address": {"@type": "PostalAddress", "streetAddress": "Istarska 157",
                "postalCode": "52215", "addressLocality": "Vodnjan"},
    "telephone": "+385 52 635 826",
    "url": "https://www.infobip.com"}
 ]}
</script>
<script>var tracking = function() { return "OIB 00000000000"; };</script>
</head><body>
<h1>INFOBIP d.o.o.</h1>
<dl>
  <dt>OIB</dt><dd>29756659895</dd>
  <dt>MBS</dt><dd>130004106</dd>
  <dt>Status</dt><dd>Aktivan</dd>
  <dt>Djelatnost</dt><dd>Računalno programiranje</dd>
</dl>
<table>
  <tr><th>Direktor</th><td>Silvio Kutić</td></tr>
  <tr><th>Vlasnik</th><td>INFOBIP LIMITED</td></tr>
</table>
<p>Rating: A+</p>
<p>Nije u blokadi</p>
<p><a href="mailto:info@infobip.com">info@infobip.com</a></p>
<p><a href="tel:052635826">052 635 826</a></p>
<div class="financije">
  Financijski podaci 2024 2023 2022
  Ukupni prihodi 128.608.959,77 101.758.420,82 88.435.177,51
  Ukupni rashodi 121.437.859,17 102.254.697,59 86.975.443,76
  Rezultat poslovanja 9.249.103,41 1.595.458,28 1.459.733,76
  Prosječan broj radnika 1401 1401 1321
</div>
</body></html>
"""


class DummyResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class SiteSession:
    """Serves companywall pages through a relay URL of the form ...?url=<encoded target>."""

    def __init__(self, search_html=SEARCH_HTML, detail_html=DETAIL_HTML):
        self.search_html = search_html
        self.detail_html = detail_html
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        target = unquote(url.split("url=", 1)[1])
        if "/pretraga" in target:
            return DummyResponse(200, self.search_html)
        if "/tvrtka/" in target:
            return DummyResponse(200, self.detail_html)
        return DummyResponse(404, "")


RELAYS = ["https://relay.test/raw?url={url}"]


@pytest.fixture
def site_session():
    return SiteSession()
