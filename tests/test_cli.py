from openpyxl import Workbook, load_workbook

from companywall import cli
from companywall.client import CompanyWallClient
from companywall.store import MemoryDocumentStore

from conftest import RELAYS, SiteSession


def fake_build_client(store_dir=None, no_cache=False, known=False):
    return CompanyWallClient(
        relays=RELAYS,
        session=SiteSession(),
        store=MemoryDocumentStore(),
        use_known_companies=known,
        background_cache=False
    )


def test_main_without_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "search" in capsys.readouterr().out


def test_search_command(monkeypatch, capsys):
    monkeypatch.setattr(cli, "build_client", fake_build_client)

    assert cli.main(["search", "-q", "Infobip"]) == 0

    out = capsys.readouterr().out
    assert "INFOBIP d.o.o." in out
    assert "OIB: 29756659895" in out


def test_search_command_not_found(monkeypatch, capsys):
    monkeypatch.setattr(cli, "build_client", fake_build_client)

    assert cli.search_command("12345678901") == 1
    assert "12345678901" in capsys.readouterr().out


def test_search_known_company_offline(capsys):
    assert cli.main(["--no-cache", "--known", "search", "-q", "Rimac"]) == 0
    assert "RIMAC TECHNOLOGY d.o.o." in capsys.readouterr().out


def test_batch_command(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(cli, "build_client", fake_build_client)
    wb = Workbook()
    ws = wb.active
    ws.append(["Naziv tvrtke"])
    ws.append(["Infobip"])
    ws.append(["12345678901"])
    input_path = tmp_path / "ulaz.xlsx"
    wb.save(input_path)

    assert cli.main(["batch", str(input_path)]) == 0

    output_path = tmp_path / "ulaz_results.xlsx"
    assert output_path.exists()
    values = [cell.value for row in load_workbook(output_path).active.iter_rows() for cell in row]
    assert "29756659895" in values
    assert "Nije pronađeno" in values
    assert "pronađeno 1" in capsys.readouterr().out


def test_batch_command_missing_file(tmp_path, capsys):
    assert cli.batch_command(str(tmp_path / "nema.xlsx")) == 1
    assert "❌" in capsys.readouterr().out
