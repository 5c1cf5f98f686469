from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_verifreg_logger():
    """CLI runs install handlers on the package logger; drop them between tests."""
    yield
    lg = logging.getLogger("verifreg")
    for h in list(lg.handlers):
        lg.removeHandler(h)
    lg.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for k in (
        "VERIFREG_STRICT_TRAILING",
        "VERIFREG_ACTOR_ID",
        "VERIFREG_LOG_LEVEL",
        "VERIFREG_LOG_FORMAT",
        "VERIFREG_LOG_FILE",
    ):
        monkeypatch.delenv(k, raising=False)
