"""Shared fixtures for lasso-unpack tests."""

import os
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
SAMPLE_BUNDLE = FIXTURES_DIR / "sample_bundle.js"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep LASSO_UNPACK_* settings from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("LASSO_UNPACK_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_bundle_source() -> str:
    return SAMPLE_BUNDLE.read_text(encoding="utf-8")


@pytest.fixture
def sample_bundle_file(tmp_path) -> Path:
    """A copy of the sample bundle in its own directory."""
    target = tmp_path / "bundle" / "sample_bundle.js"
    target.parent.mkdir()
    target.write_text(SAMPLE_BUNDLE.read_text(encoding="utf-8"), encoding="utf-8")
    return target
