# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Unit test fixtures."""

from __future__ import annotations

import os

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_test_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Ensure all tests run in an isolated environment.

    Runs each test from an empty working directory, so no `.env` file is
    picked up, clears ContextWeaver environment variables, and resets the
    global settings before and after the test.
    """
    from contextweaver.config.settings import reset_settings

    workdir = tmp_path / "work"
    workdir.mkdir(exist_ok=True)
    monkeypatch.chdir(workdir)

    for key in list(os.environ):
        if key.upper().startswith("CONTEXTWEAVER_"):
            monkeypatch.delenv(key, raising=False)

    reset_settings()
    yield
    reset_settings()
