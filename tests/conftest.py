"""Pytest configuration for pixelcomp tests."""

from typing import Any


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "spatial: mark test as requiring the spatial filter dependencies (scipy)",
    )
