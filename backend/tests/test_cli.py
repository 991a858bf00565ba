"""Tests for the command-line runner."""

from unittest.mock import patch

from conftest import FakeService, answer
from proofmark.__main__ import create_argument_parser, main, run
from proofmark.services.exceptions import ModelNetworkError
from proofmark.services.proofreader import Proofreader

_LOWER_I = {"originalText": "i", "correctedText": "I", "type": "capitalization", "explanation": "pronoun"}
_GUD = {"originalText": "gud", "correctedText": "good", "type": "spelling", "explanation": "typo"}


def test_parser_defaults():
    args = create_argument_parser().parse_args(["some text"])
    assert args.text == "some text"
    assert args.accept_all is False


async def test_run_prints_report():
    service = FakeService(answer("I think he is good", _LOWER_I, _GUD))
    report = await run("i think he is gud", proofreader=Proofreader(service))
    assert "Found 2 corrections:" in report
    assert "Position: 14-17" in report
    assert "ACCEPTED TEXT" not in report


async def test_run_accept_all():
    service = FakeService(answer("I think he is good", _LOWER_I, _GUD))
    report = await run("i think he is gud", accept_all=True, proofreader=Proofreader(service))
    assert report.endswith("ACCEPTED TEXT:\nI think he is good\n")


async def test_run_reports_failure_notice():
    service = FakeService()
    service.prompt_error = ModelNetworkError("down")
    report = await run("i think", proofreader=Proofreader(service))
    assert "Network error" in report


def test_main_reads_argument(capsys):
    async def fake_run(text, accept_all=False, proofreader=None):
        return f"checked: {text}\n"

    with patch("proofmark.__main__.run", fake_run), patch("proofmark.__main__.configure_logging"):
        assert main(["hello wrld"]) == 0
    assert capsys.readouterr().out == "checked: hello wrld\n"
