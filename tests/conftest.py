"""Pytest hooks and fixtures."""

import os

import pytest
from loguru import logger

from cwdclient.config import clear_config_cache


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path, monkeypatch):
    """Keep the host's ~/.cwdclient and CWDCLIENT_* variables out of every test."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in list(os.environ):
        if key.startswith("CWDCLIENT_"):
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()
    logger.enable("cwdclient")
