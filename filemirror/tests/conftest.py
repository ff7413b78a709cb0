"""Module that adds flags to pytest to disable tests that depend on the environment."""

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--no-watch",
        action="store_true",
        default=False,
        help="Skip tests that rely on real file system notifications",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "watch: mark test as requiring file system notifications to run"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--no-watch"):
        skip_watch = pytest.mark.skip(reason="disabled with --no-watch option")

        for item in items:
            if "watch" in item.keywords:
                item.add_marker(skip_watch)
