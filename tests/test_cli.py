#!/usr/bin/env python3
"""
Tests for the diarize-eval command line.
"""

import csv
import json

from diarize_eval.framework.runner import main
from diarize_eval.transcript_comparison.csv_parser import load_transcript_csv


def test_compare_writes_report(gold_csv, transcript_csv, tmp_path):
    output = tmp_path / "comparison.csv"
    code = main(["--no-progress", "compare", str(gold_csv), str(transcript_csv), "-o", str(output), "--no-summary"])

    assert code == 0
    with open(output, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][:3] == ["Gold Speaker", "Transcript Speaker", "Speaker Correct?"]
    assert [row[1] for row in rows[1:]] == ["A", "B", "A", "B"]


def test_compare_json_with_summary(gold_csv, transcript_csv, tmp_path):
    output = tmp_path / "comparison.json"
    code = main(["--no-progress", "compare", str(gold_csv), str(transcript_csv), "-o", str(output), "-f", "json"])

    assert code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["alignment"]["mapping"] == {"1": "A", "2": "B"}


def test_compare_missing_input_returns_error(transcript_csv, tmp_path):
    output = tmp_path / "comparison.csv"
    code = main(["--no-progress", "compare", str(tmp_path / "missing.csv"), str(transcript_csv), "-o", str(output)])

    assert code == 1
    assert not output.exists()


def test_compare_speaker_limit_returns_error(gold_csv, transcript_csv, tmp_path):
    output = tmp_path / "comparison.csv"
    code = main(["--no-progress", "compare", str(gold_csv), str(transcript_csv), "-o", str(output), "-m", "1"])

    assert code == 1
    assert not output.exists()


def test_relabel_from_gold(gold_csv, transcript_csv, tmp_path):
    output = tmp_path / "relabeled.csv"
    code = main(["relabel", str(transcript_csv), "-o", str(output), "--from-gold", str(gold_csv)])

    assert code == 0
    rows = load_transcript_csv(output)
    assert [row.speaker for row in rows] == ["1", "2", "1", "2"]
    assert rows[1].utterance == "i am fine thanks for asking"


def test_relabel_with_explicit_map(transcript_csv, tmp_path):
    output = tmp_path / "relabeled.csv"
    code = main(["relabel", str(transcript_csv), "-o", str(output), "--speaker-map", "A=Interviewer,B=Participant"])

    assert code == 0
    assert [row.speaker for row in load_transcript_csv(output)] == [
        "Interviewer", "Participant", "Interviewer", "Participant"
    ]


def test_relabel_bad_map_returns_error(transcript_csv, tmp_path):
    output = tmp_path / "relabeled.csv"
    code = main(["relabel", str(transcript_csv), "-o", str(output), "--speaker-map", "A-Interviewer"])

    assert code == 1
    assert not output.exists()


def test_export_transcript(tmp_path):
    source = tmp_path / "transcript.json"
    source.write_text(json.dumps({"utterances": [
        {"start": 0, "end": 1500, "speaker": "A", "text": "hello, world"},
    ]}), encoding="utf-8")

    csv_out = tmp_path / "transcript.csv"
    assert main(["export-transcript", str(source), "-o", str(csv_out)]) == 0
    assert csv_out.read_text(encoding="utf-8") == "Timestamp,Speaker,Utterance\n[0.00 - 1.50],A,hello world"

    txt_out = tmp_path / "transcript.txt"
    assert main(["export-transcript", str(source), "-o", str(txt_out), "--text"]) == 0
    assert txt_out.read_text(encoding="utf-8") == "A: hello, world\n"


def test_log_file(gold_csv, transcript_csv, tmp_path):
    log_file = tmp_path / "logs" / "run.log"
    output = tmp_path / "comparison.csv"
    code = main([
        "-l", "INFO", "--log-file", str(log_file), "--structured-logs", "--no-progress",
        "compare", str(gold_csv), str(transcript_csv), "-o", str(output), "--no-summary",
    ])

    assert code == 0
    entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert any("Best speaker mapping" in entry["message"] for entry in entries)


def test_show_defaults(capsys):
    assert main(["--show-defaults"]) == 0
    assert "Default Values" in capsys.readouterr().out


def test_unknown_env_log_level_falls_back(monkeypatch, gold_csv, transcript_csv, tmp_path):
    monkeypatch.setenv("DIARIZE_EVAL_LOG_LEVEL", "verbose")
    output = tmp_path / "comparison.csv"
    code = main(["--no-progress", "compare", str(gold_csv), str(transcript_csv), "-o", str(output), "--no-summary"])

    assert code == 0
    assert output.exists()


def test_critical_log_level_accepted(gold_csv, transcript_csv, tmp_path):
    output = tmp_path / "comparison.csv"
    code = main(["-l", "critical", "--no-progress", "compare", str(gold_csv), str(transcript_csv), "-o", str(output), "--no-summary"])

    assert code == 0
