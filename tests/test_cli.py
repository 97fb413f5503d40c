"""Tests for the command-line entry point and saved-analysis loading."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from harreport.__main__ import main
from harreport.errors import AnalysisFailure, TransportFailure
from harreport.loader import load_analysis
from harreport.schemas import AnalysisEnvelope


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("harreport.__main__.configure_logging"):
        yield


class TestLoadAnalysis:
    def test_envelope_json(self, tmp_path, envelope):
        path = tmp_path / "saved.json"
        path.write_text(json.dumps(envelope))
        loaded = load_analysis(path)
        assert loaded.success is True
        assert loaded.cached is True
        assert loaded.data["summary"]["total_requests"] == 12345

    def test_bare_result_wrapped(self, tmp_path, raw_result):
        path = tmp_path / "result.json"
        path.write_text(json.dumps(raw_result))
        loaded = load_analysis(path)
        assert loaded.success is True
        assert loaded.cached is False
        assert loaded.data == raw_result

    def test_yaml(self, tmp_path):
        path = tmp_path / "result.yaml"
        path.write_text(
            "summary:\n"
            "  total_requests: 3\n"
            "path_pattern_analysis:\n"
            "  total_patterns: 1\n"
            "analysis_timestamp: 2024-01-15T14:05:09Z\n"
        )
        loaded = load_analysis(path)
        assert loaded.data["summary"]["total_requests"] == 3

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(AnalysisFailure, match="does not contain an analysis object"):
            load_analysis(path)

    def test_unparseable(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("summary: [unclosed\n")
        with pytest.raises(AnalysisFailure, match="Could not parse"):
            load_analysis(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b"\xffsummary: {}\n")
        with pytest.raises(AnalysisFailure, match="Could not parse"):
            load_analysis(path)

    def test_invalid_envelope(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"success": True, "data": 5}))
        with pytest.raises(AnalysisFailure, match="not a valid analysis response"):
            load_analysis(path)


class TestMain:
    def test_text_report_from_input(self, tmp_path, envelope, capsys):
        path = tmp_path / "saved.json"
        path.write_text(json.dumps(envelope))
        assert main(["--input", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Total requests:   12,345" in out
        assert "#1   GET     /api/search" in out
        assert "GET GET /api/items/{id}" in out
        assert "e.g. /api/items/2" in out
        assert "e.g. /api/items/3" not in out
        assert "200: 9,000 response(s)" in out
        assert "Generated at: 1/15/2024, 2:05:09 PM UTC" in out
        assert "(served from analysis cache)" in out

    def test_json_output(self, tmp_path, raw_result, capsys):
        path = tmp_path / "result.json"
        path.write_text(json.dumps(raw_result))
        assert main(["--input", str(path), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["error_5xx"] == 3
        assert data["analysis_info"]["cached"] is False

    def test_resort_flag(self, tmp_path, raw_result, capsys):
        raw_result["path_pattern_analysis"]["top_ten_traffic_patterns"].reverse()
        path = tmp_path / "result.json"
        path.write_text(json.dumps(raw_result))
        assert main(["--input", str(path), "--json", "--resort"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["pattern_analysis"]["top_patterns_by_requests"][0]["total_requests"] == 500

    def test_analysis_failure_exit_code(self, tmp_path, capsys):
        path = tmp_path / "failed.json"
        path.write_text(json.dumps({"success": False}))
        assert main(["--input", str(path)]) == 1
        assert "ERROR: Analysis failed" in capsys.readouterr().out

    def test_missing_input_file(self, tmp_path, capsys):
        assert main(["--input", str(tmp_path / "nope.json")]) == 1
        assert "ERROR:" in capsys.readouterr().out

    def test_undecodable_input_file(self, tmp_path, capsys):
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        assert main(["--input", str(path)]) == 1
        assert "ERROR: Could not parse" in capsys.readouterr().out

    def test_fetches_from_backend(self, envelope, capsys):
        fetched = AsyncMock(return_value=AnalysisEnvelope.model_validate(envelope))
        with patch("harreport.__main__.fetch_envelope", new=fetched):
            assert main(["captures/b.har", "--json"]) == 0
        fetched.assert_awaited_once_with("captures/b.har")
        assert json.loads(capsys.readouterr().out)["summary"]["total_requests"] == 12345

    def test_transport_failure(self, capsys):
        failing = AsyncMock(side_effect=TransportFailure("ConnectError on POST http://x after 4 attempts"))
        with patch("harreport.__main__.fetch_envelope", new=failing):
            assert main([]) == 1
        failing.assert_awaited_once_with(None)
        assert "ERROR: ConnectError on POST" in capsys.readouterr().out
