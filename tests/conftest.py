# Security Command Center Inventory MCP Server
# File: tests/conftest.py
# Version: v2

from __future__ import annotations

import os

import google.auth
import google.auth.exceptions
import pytest


@pytest.fixture(autouse=True)
def _clean_scc_env(monkeypatch):
    """Start every test without SCC_* settings leaking in from the shell."""
    for name in list(os.environ):
        if name.startswith("SCC_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _no_default_credentials(monkeypatch):
    """Application Default Credentials are absent unless a test provides them."""

    def _missing(*args, **kwargs):
        raise google.auth.exceptions.DefaultCredentialsError(
            "Could not automatically determine credentials."
        )

    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    monkeypatch.setattr(google.auth, "default", _missing)
