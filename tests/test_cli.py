import json

from sifter.cli import build_parser, main


def test_score_command(capsys, regression_metrics):
    code = main(["score", "--metrics", json.dumps(regression_metrics), "--input", "@moonproject"])
    payload = json.loads(capsys.readouterr().out)

    assert code == 0
    assert payload["identifier"]["type"] == "twitter"
    assert payload["result"]["score"] == 73
    assert payload["result"]["tier"]["tier"] == "ELEVATED"
    assert payload["result"]["verdict"] == "PROCEED"
    assert payload["display_verdict"] == "REJECT"
    assert payload["breakdown"][0]["key"] == "likely_agency"


def test_score_command_rejects_bad_metrics(capsys):
    assert main(["score", "--metrics", "[1, 2]"]) == 2
    assert main(["score", "--metrics", "{not json"]) == 2
    assert "error:" in capsys.readouterr().err


def test_batch_command(tmp_path, capsys):
    path = tmp_path / "projects.csv"
    path.write_text("input,team_identity,likely_agency\nAlpha,10,10\nBeta,90,90\n", encoding="utf-8")

    assert main(["batch", str(path)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["summary"]["total"] == 2
    assert payload["summary"]["passed"] == 1
    assert payload["summary"]["rejected"] == 1


def test_verify_command(tmp_path, capsys):
    path = tmp_path / "submission.json"
    path.write_text(
        json.dumps(
            {
                "entity_name": "Unknown Agency",
                "evidence": [{"url": "https://example.org/a"}, {"url": "https://example.org/b"}],
            }
        ),
        encoding="utf-8",
    )

    assert main(["verify", str(path)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["mode"] == "individual"
    assert payload["confidence"] == 35
    assert payload["auto_decision"] == "auto_rejected"
    assert [check["id"] for check in payload["checks"]][0] == "entity_match"


def test_verify_command_mode_override(tmp_path, capsys):
    path = tmp_path / "submission.json"
    path.write_text(json.dumps({"entity_name": "Unknown Agency"}), encoding="utf-8")

    assert main(["verify", str(path), "--mode", "researcher"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["mode"] == "researcher"
    assert payload["checks"][2]["status"] == "failed"


def test_verify_command_missing_file(tmp_path, capsys):
    assert main(["verify", str(tmp_path / "nope.json")]) == 2
    assert "error:" in capsys.readouterr().err


def test_parser_lists_commands():
    parser = build_parser()
    args = parser.parse_args(["batch", "file.csv"])
    assert args.command == "batch"
    assert args.path == "file.csv"


def test_invalid_config_reports_error(tmp_path, monkeypatch, capsys):
    path = tmp_path / "broken.yaml"
    path.write_text("modes: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("SIFTER_CONFIG_PATH", str(path))

    assert main(["score", "--metrics", "{}"]) == 2
    assert "error:" in capsys.readouterr().err
