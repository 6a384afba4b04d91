import json
from unittest.mock import MagicMock

import pytest

import court_lookup.cli.main as cli_mod
from court_lookup.lib.errors import BrowserLaunchError
from court_lookup.models.case import CaseRecord
from court_lookup.models.search_outcome import SearchOutcome, SearchStatus


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli_mod, "setup_logging", lambda **kwargs: None)


def _cli(outcome=None, error=None):
    service = MagicMock()
    if error is not None:
        service.search.side_effect = error
    else:
        service.search.return_value = outcome
    seen = {}

    def factory(settings):
        seen["settings"] = settings
        return service

    return cli_mod.CourtLookupCLI(service_factory=factory), service, seen


@pytest.mark.parametrize(
    "status, code",
    [
        (SearchStatus.SUCCESS, 0),
        (SearchStatus.ERROR, 1),
        (SearchStatus.CAPTCHA_FAILED, 1),
        (SearchStatus.NOT_FOUND, 2),
    ],
)
def test_exit_codes(status, code, capsys):
    case_info = CaseRecord(case_number="12345") if status == SearchStatus.SUCCESS else None
    cli, _, _ = _cli(SearchOutcome(status=status, case_info=case_info))

    assert cli.run(["search", "FAO", "12345", "2023"]) == code
    printed = json.loads(capsys.readouterr().out)
    assert printed["status"] == status


def test_search_passes_query_and_flags(tmp_path, capsys):
    outcome = SearchOutcome(status=SearchStatus.SUCCESS, case_info=CaseRecord(case_number="12345"), raw_html="<html/>")
    cli, service, seen = _cli(outcome)
    out_file = tmp_path / "out" / "result.json"

    code = cli.run(
        [
            "search",
            "FAO",
            "12345",
            "2023",
            "--no-headless",
            "--base-url",
            "https://court.example.test/",
            "--output",
            str(out_file),
            "--no-html",
        ]
    )

    assert code == 0
    query = service.search.call_args[0][0]
    assert (query.case_type, query.case_number, query.filing_year) == ("FAO", "12345", 2023)
    assert seen["settings"].headless is False
    assert seen["settings"].base_url == "https://court.example.test"
    assert "raw_html" not in json.loads(capsys.readouterr().out)
    # the file keeps the page markup
    assert json.loads(out_file.read_text(encoding="utf-8"))["raw_html"] == "<html/>"


def test_invalid_query_never_starts_a_search(capsys):
    cli, service, _ = _cli()

    assert cli.run(["search", "FAO", "12345", "1800"]) == 1
    service.search.assert_not_called()
    assert "Filing year" in capsys.readouterr().err


def test_browser_launch_error_exits_one(capsys):
    cli, _, _ = _cli(error=BrowserLaunchError("Failed to launch browser: no chrome"))

    assert cli.run(["search", "FAO", "12345", "2023"]) == 1
    assert "no chrome" in capsys.readouterr().err


def test_captcha_balance(monkeypatch, capsys):
    class FakeSolver:
        def __init__(self, settings):
            pass

        is_configured = True

        def get_balance(self):
            return 1.5

    monkeypatch.setattr(cli_mod, "CaptchaSolver", FakeSolver)
    cli, _, _ = _cli()

    assert cli.run(["captcha-balance"]) == 0
    assert capsys.readouterr().out.strip() == "1.5000"


def test_no_command_prints_help(capsys):
    cli, _, _ = _cli()
    assert cli.run([]) == 1
    assert "court-lookup" in capsys.readouterr().out
