import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from engagetrack.__main__ import main
from engagetrack.cli import parse_args


def test_cli_parses_live_flags():
    config = parse_args(
        ["live", "--camera", "1", "--session", "standup", "--participant", "alice", "--no-window"]
    )

    assert config.mode == "live"
    assert config.camera.device == 1
    assert config.session.session_id == "standup"
    assert config.session.participant_id == "alice"
    assert config.session.consent is True
    assert config.display.enabled is False


def test_cli_generates_ids_when_missing():
    config = parse_args(["live"])

    assert config.session.session_id
    assert config.session.participant_id
    assert config.session.metric_interval == 1.0


def test_cli_parses_analyze_flags(tmp_path: Path):
    input_path = tmp_path / "input.jpg"
    input_path.write_bytes(b"fake")

    config = parse_args(
        [
            "analyze",
            str(input_path),
            "-o",
            "out.mp4",
            "--frames",
            "30",
            "--no-consent",
            "--metric-interval",
            "0.5",
        ]
    )

    assert config.mode == "analyze"
    assert config.input_path == str(input_path)
    assert config.output.path == "out.mp4"
    assert config.output.frames == 30
    assert config.session.consent is False
    assert config.session.metric_interval == 0.5


def test_cli_rejects_missing_input(tmp_path: Path):
    with pytest.raises(SystemExit):
        parse_args(["analyze", str(tmp_path / "missing.mp4")])


def test_cli_rejects_negative_interval():
    with pytest.raises(SystemExit):
        parse_args(["live", "--metric-interval", "-1"])


def test_cli_requires_mode():
    with pytest.raises(SystemExit):
        parse_args([])


def test_parse_args_leaves_logging_alone():
    with patch("logging.basicConfig") as basic_config:
        config = parse_args(["live", "-v"])

    assert config.verbose is True
    assert parse_args(["live"]).verbose is False
    basic_config.assert_not_called()


def test_main_configures_logging_from_verbose_flag(monkeypatch):
    monkeypatch.setattr("sys.argv", ["engagetrack", "live", "--verbose"])
    with patch("logging.basicConfig") as basic_config, patch(
        "engagetrack.__main__.run_live", return_value=None
    ) as run_live, patch("engagetrack.__main__.print_report"):
        main()

    assert basic_config.call_args.kwargs["level"] == logging.DEBUG
    run_live.assert_called_once()
