from __future__ import annotations

from pathlib import Path

import pytest

from mutatio.testing import Pipeline, PomFiles, make_pipeline


@pytest.fixture
def poms(tmp_path: Path) -> PomFiles:
    return PomFiles(tmp_path)


@pytest.fixture
def pipeline(poms: PomFiles, tmp_path: Path) -> Pipeline:
    """Fake repository on ``development`` with a two-module reactor at 1.2.0-SNAPSHOT."""
    poms.reactor()
    return make_pipeline(tmp_path)
