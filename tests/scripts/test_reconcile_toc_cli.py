"""Tests for the reconcile_toc command-line script."""

import json
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[2] / "scripts"))

from reconcile_toc import main  # noqa: E402


@pytest.fixture
def toc_file(tmp_path, sample_toc_payload):
    path = tmp_path / "toc.json"
    path.write_text(json.dumps(sample_toc_payload))
    return path


class TestReconcileTocCli:
    """Tests for scripts/reconcile_toc.py main()."""

    def test_main_when_total_pages_given_then_reconciled_file_written(self, toc_file, tmp_path):
        # Arrange
        output = tmp_path / "out.json"

        # Act
        code = main([str(toc_file), "--total-pages", "80", "-o", str(output)])

        # Assert
        assert code == 0
        payload = json.loads(output.read_text())
        titles = [a["title"] for a in payload["articles"]]
        assert "Test Your Play Solutions" not in titles
        typ = next(a for a in payload["articles"] if a["title"] == "Test Your Play")
        assert typ["pdf_pages"] == [[7, 7], [72, 72]]
        assert typ["parent_article"] == "Bidding Match"

    def test_main_when_fragments_given_then_interleaved_file_written(self, toc_file, tmp_path):
        fragments = tmp_path / "blocks.json"
        fragments.write_text(json.dumps({
            "Test Your Play": [
                {"id": "pa", "type": "text", "data": {"text": "**Problem A** South holds"}},
                {"id": "sa", "type": "text", "data": {"text": "**Solution A** Win the ace"}},
                {"id": "pb", "type": "text", "data": {"text": "**Problem B** ..."}},
            ],
        }))
        output = tmp_path / "out.json"

        code = main([str(toc_file), "--total-pages", "80", "-o", str(output), "--fragments", str(fragments)])

        assert code == 0
        written = json.loads((tmp_path / "out.fragments.json").read_text())
        assert [b["id"] for b in written["Test Your Play"]] == ["pa", "sol-a", "pb"]

    def test_main_when_report_requested_then_warnings_written(self, tmp_path):
        toc = tmp_path / "toc.json"
        toc.write_text(json.dumps({
            "issue": {"month": 4, "year": 2025},
            "articles": [{"title": "Solutions", "pdf_pages": [[9, 4]]}],
        }))
        report = tmp_path / "warnings.json"

        main([str(toc), "--total-pages", "20", "--report", str(report)])

        summary = json.loads(report.read_text())["summary"]
        assert summary["malformed_input"] == 1
        assert summary["unresolved_reference"] == 1

    def test_main_when_payload_invalid_then_exit_code_one(self, tmp_path):
        toc = tmp_path / "toc.json"
        toc.write_text(json.dumps({"issue": {"month": 13, "year": 2025}, "articles": []}))

        assert main([str(toc), "--total-pages", "20"]) == 1

    def test_main_when_no_page_count_then_usage_error(self, toc_file):
        with pytest.raises(SystemExit):
            main([str(toc_file)])

    def test_main_when_page_fragments_given_then_assigned_by_page(self, toc_file, tmp_path, capsys):
        # Arrange
        stream = tmp_path / "stream.json"
        stream.write_text(json.dumps([
            {"id": "cover", "type": "text", "page": 1, "data": {"text": "April 2025"}},
            {"id": "b7", "type": "text", "page": 7, "data": {"text": "East passed throughout"}},
            {"id": "s9", "type": "text", "page": 9, "data": {"text": "Round one of the Swiss"}},
        ]))
        output = tmp_path / "out.json"

        # Act
        code = main([str(toc_file), "--total-pages", "80", "-o", str(output), "--page-fragments", str(stream)])

        # Assert
        assert code == 0
        written = json.loads((tmp_path / "out.fragments.json").read_text())
        assert [b["id"] for b in written["Bidding Match"]] == ["b7"]
        assert [b["id"] for b in written["Swiss Teams"]] == ["s9"]
        assert "1 fragment(s) on unclaimed pages discarded" in capsys.readouterr().out

    def test_main_when_both_fragment_inputs_then_usage_error(self, toc_file, tmp_path):
        with pytest.raises(SystemExit):
            main([str(toc_file), "--total-pages", "80",
                  "--fragments", str(tmp_path / "a.json"), "--page-fragments", str(tmp_path / "b.json")])
