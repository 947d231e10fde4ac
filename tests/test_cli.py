"""Tests for the command-line entry point."""

import json

import pytest
from ymca_advisory.cli import load_submission, main


@pytest.fixture
def submission_file(tmp_path, all_yes_responses):
    path = tmp_path / "submissions.json"
    records = [
        {"organizationId": "Y001", "responses": {}, "timestamp": "2024-01-15T00:00:00Z"},
        {"organizationId": "Y001", "responses": all_yes_responses, "timestamp": "2024-02-15T00:00:00Z"},
        {"organizationId": "Y002", "responses": {}, "timestamp": "2024-03-15T00:00:00Z"},
    ]
    path.write_text(json.dumps(records))
    return path


@pytest.fixture(autouse=True)
def no_ai(monkeypatch):
    monkeypatch.setenv("ENABLE_AI_ADVISORS", "false")


class TestLoadSubmission:
    def test_latest_for_organization(self, submission_file):
        submission = load_submission(submission_file, "Y001")
        assert submission.timestamp.month == 2

    def test_unknown_organization(self, submission_file):
        with pytest.raises(ValueError, match="No submission"):
            load_submission(submission_file, "Y999")


class TestMain:
    def test_score_json(self, submission_file, tmp_path):
        output = tmp_path / "out" / "snapshot.json"
        code = main(["score", str(submission_file), "--organization", "Y001", "--json", "--output", str(output)])
        assert code == 0
        snapshot = json.loads(output.read_text())
        assert snapshot["totalPoints"] == 78
        assert snapshot["supportDesignation"] == "Independent Improvement"

    def test_score_table(self, submission_file):
        assert main(["score", str(submission_file), "--organization", "Y002"]) == 0

    def test_analyze_without_ai(self, submission_file, tmp_path):
        output = tmp_path / "report.json"
        code = main(
            [
                "--log-level",
                "WARNING",
                "analyze",
                str(submission_file),
                "--organization",
                "Y002",
                "--name",
                "Lakeside YMCA",
                "--no-ai",
                "--output",
                str(output),
            ]
        )
        assert code == 0
        report = json.loads(output.read_text())
        assert report["organizationName"] == "Lakeside YMCA"
        assert report["overallAssessment"]["supportDesignation"] == "Y-USA Support"
        assert report["summary"]["fallbackAnalyses"] == 4

    def test_missing_file(self, tmp_path):
        assert main(["score", str(tmp_path / "missing.json")]) == 1
