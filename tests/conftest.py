"""Shared fixtures for the report tests."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from sales_reports.relations import InputRelations
from tests.factories import empty_frames, sample_frames, write_source_database


@pytest.fixture
def frames() -> dict[str, pd.DataFrame]:
    return sample_frames()


@pytest.fixture
def relations() -> InputRelations:
    return InputRelations.from_frames(**sample_frames())


@pytest.fixture
def empty_relations() -> InputRelations:
    return InputRelations.from_frames(**empty_frames())


@pytest.fixture
def source_db(tmp_path: Path) -> Path:
    return write_source_database(tmp_path / 'sales.db', sample_frames())
