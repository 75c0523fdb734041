"""
Root pytest configuration for aarbind.

Integration tests (marked ``integration``) call the installed ``aarbind``
executable and, for a real bind, need go, gobind and an Android SDK. They
are excluded by the default ``-m 'not integration'`` in pyproject.toml;
pass --full to run them as well.
"""

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Also run integration tests against the installed aarbind CLI and toolchains",
    )


def pytest_configure(config):
    if not config.getoption("--full"):
        return
    # Only drop the marker expression pyproject.toml adds; keep an explicit -m
    if config.getoption("-m", "") == "not integration":
        config.option.markexpr = ""

