"""
Pytest configuration for the botbundle test suite.

Integration tests download real release binaries and are skipped unless
pytest is run with --full.
"""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests (network)",
    )


def pytest_configure(config):
    """Register the integration marker."""
    config.addinivalue_line("markers", "integration: downloads real dependencies over the network")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --full was given."""
    if config.getoption("--full"):
        return
    skip_integration = pytest.mark.skip(reason="needs --full (network access)")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
