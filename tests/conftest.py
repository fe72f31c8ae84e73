"""
Pytest configuration and fixtures for dq_constraints tests.
"""

import sys
from pathlib import Path

import polars as pl
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture(scope="session")
def project_root():
    """Return project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def df_missing() -> pl.DataFrame:
    """
    Twelve rows with missing values.

    att1 is 50% complete, att2 is 75% complete, item is fully populated.
    """
    return pl.DataFrame(
        {
            "item": [str(i) for i in range(1, 13)],
            "att1": ["a", "b", None, None, "a", "a", None, "b", None, "a", None, None],
            "att2": ["d", "f", "d", "f", None, "f", "d", "f", None, "f", "d", None],
        }
    )


@pytest.fixture
def df_numeric() -> pl.DataFrame:
    """Six rows with a numeric column (mean of non-null values is 3.6) and a string column."""
    return pl.DataFrame(
        {
            "item": [1, 2, 3, 4, 5, 6],
            "att1": [1.0, 2.0, None, 4.0, 5.0, 6.0],
            "att2": ["a", "b", "c", "d", "e", "f"],
        }
    )


@pytest.fixture
def df_empty() -> pl.DataFrame:
    """No rows, numeric column att1."""
    return pl.DataFrame({"att1": []}, schema={"att1": pl.Float64})
