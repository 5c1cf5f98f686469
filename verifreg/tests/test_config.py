from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from verifreg import config
from verifreg import logging as vlog
from verifreg.errors import ConfigError


def test_defaults() -> None:
    cfg = config.load()
    assert cfg.codec.strict_trailing is False
    assert cfg.actor.actor_id == config.VERIFREG_ACTOR_ID == 6
    assert cfg.actor.codec == config.DAG_CBOR_CODEC == 0x71
    assert cfg.log.level == "INFO"
    assert cfg.log.format == "auto"
    assert cfg.log.file is None


def test_toml_file(tmp_path: Path) -> None:
    p = tmp_path / "verifreg.toml"
    p.write_text(
        "[codec]\nstrict_trailing = true\n\n[actor]\nactor_id = 1006\n\n[log]\nlevel = \"debug\"\n",
        encoding="utf-8",
    )
    cfg = config.load(p)
    assert cfg.codec.strict_trailing is True
    assert cfg.actor.actor_id == 1006
    assert cfg.actor.codec == 0x71
    assert cfg.log.level == "DEBUG"


def test_json_file(tmp_path: Path) -> None:
    p = tmp_path / "verifreg.json"
    p.write_text(json.dumps({"log": {"format": "JSON"}}), encoding="utf-8")
    assert config.load(str(p)).log.format == "json"


def test_env_beats_file_and_overrides_beat_env(tmp_path: Path, monkeypatch) -> None:
    p = tmp_path / "verifreg.toml"
    p.write_text("[actor]\nactor_id = 10\n", encoding="utf-8")
    monkeypatch.setenv("VERIFREG_ACTOR_ID", "0x14")
    assert config.load(p).actor.actor_id == 20
    assert config.load(p, actor={"actor_id": 30}).actor.actor_id == 30


def test_env_layer(monkeypatch) -> None:
    monkeypatch.setenv("VERIFREG_STRICT_TRAILING", "yes")
    monkeypatch.setenv("VERIFREG_LOG_LEVEL", "warning")
    monkeypatch.setenv("VERIFREG_LOG_FORMAT", "text")
    monkeypatch.setenv("VERIFREG_LOG_FILE", "")
    cfg = config.load()
    assert cfg.codec.strict_trailing is True
    assert cfg.log.level == "WARNING"
    assert cfg.log.format == "text"
    assert cfg.log.file is None


@pytest.mark.parametrize(
    "var,value",
    [
        ("VERIFREG_STRICT_TRAILING", "maybe"),
        ("VERIFREG_ACTOR_ID", "six"),
        ("VERIFREG_ACTOR_ID", "-1"),
        ("VERIFREG_LOG_LEVEL", "LOUD"),
        ("VERIFREG_LOG_FORMAT", "xml"),
    ],
)
def test_invalid_env_values(monkeypatch, var: str, value: str) -> None:
    monkeypatch.setenv(var, value)
    with pytest.raises(ConfigError):
        config.load()


def test_missing_and_unparsable_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        config.load(tmp_path / "nope.toml")
    bad = tmp_path / "bad.toml"
    bad.write_text("[codec\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        config.load(bad)
    yaml = tmp_path / "c.yaml"
    yaml.write_text("codec: {}\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        config.load(yaml)


def test_main_prints_json(capsys) -> None:
    assert config.main([]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["actor"] == {"actor_id": 6, "codec": 0x71}


def test_main_reports_errors(tmp_path: Path, capsys) -> None:
    assert config.main([str(tmp_path / "missing.toml")]) == 2
    assert "config error" in capsys.readouterr().err


# ------------------------
# Logging wired from config
# ------------------------


def test_configure_json_logging() -> None:
    buf = io.StringIO()
    vlog.configure(json=True, level="DEBUG", stream=buf)
    log = vlog.get_logger("verifreg.test")
    with vlog.trace_scope("abc123"):
        vlog.bind(method="GetClaims")
        log.debug("dispatching", extra={"params_len": 7, "raw": b"\x01"})
    rec = json.loads(buf.getvalue().strip())
    assert rec["msg"] == "dispatching"
    assert rec["trace_id"] == "abc123"
    assert rec["method"] == "GetClaims"
    assert rec["params_len"] == 7
    assert rec["raw"] == "01"
    assert vlog.context() == {}


def test_configure_text_logging_respects_level() -> None:
    buf = io.StringIO()
    vlog.configure(json=False, level="WARNING", stream=buf)
    log = vlog.get_logger("verifreg.test")
    log.info("hidden")
    log.warning("shown")
    lines = buf.getvalue().splitlines()
    assert len(lines) == 1
    assert "WARNING" in lines[0] and lines[0].endswith("| shown")


def test_configure_from_config_writes_log_file(tmp_path: Path) -> None:
    target = tmp_path / "logs" / "verifreg.jsonl"
    cfg = config.load(log={"file": str(target), "format": "text"})
    vlog.configure_from_config(cfg)
    vlog.get_logger("verifreg.test").info("to file")
    for h in logging.getLogger("verifreg").handlers:
        h.flush()
    rec = json.loads(target.read_text(encoding="utf-8").strip())
    assert rec["msg"] == "to file"
