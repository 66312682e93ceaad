import json

import pytest

from virtual_interviewer.__main__ import main


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in ("INTERVIEW_ANSWER_TIMEOUT", "INTERVIEW_JOBS_FILE", "INTERVIEW_ENABLE_TTS",
                 "INTERVIEW_ENABLE_STT", "INTERVIEW_LOG_LEVEL", "INTERVIEW_EXPORT_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("INTERVIEW_LOG_FILE", str(tmp_path / "interview.log"))


def test_list_roles(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "qa: QA Engineer" in out
    assert "junior_dev: Junior Developer" in out


def test_unknown_option(capsys):
    assert main(["--loud"]) == 1
    assert "Unknown option" in capsys.readouterr().out


def test_invalid_timeout(capsys):
    assert main(["qa", "--timeout=0"]) == 1
    assert main(["qa", "--timeout=abc"]) == 1


def test_invalid_environment_is_reported(monkeypatch, capsys):
    monkeypatch.setenv("INTERVIEW_ANSWER_TIMEOUT", "never")
    assert main(["qa"]) == 1
    assert "Configuration Error" in capsys.readouterr().out


def test_unknown_role(capsys):
    assert main(["astronaut", "--text", "--typed"]) == 1
    assert "Unknown job key" in capsys.readouterr().out


def test_typed_interview_is_exported(monkeypatch, tmp_path, capsys):
    answers = iter([
        "I built a react app with node for 2 years",
        "html and css",
        "javascript",
        "console logs",
        "nothing",
        "nothing",
        "nothing",
    ])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers, ""))
    export_dir = tmp_path / "sessions"

    assert main(["junior_dev", "--text", "--typed", f"--export={export_dir}"]) == 0

    files = list(export_dir.glob("s_*.json"))
    assert len(files) == 1
    doc = json.loads(files[0].read_text())
    assert doc["jobKey"] == "junior_dev"
    assert doc["finalScore"] is not None
    assert all(step["followup"] == (i % 2 == 1) for i, step in enumerate(doc["steps"]))
    out = capsys.readouterr().out
    assert "FINAL REPORT - Junior Developer" in out
