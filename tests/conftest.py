import os

os.environ.setdefault("ENVIRONMENT", "test")


def pytest_configure(config):
    from depletion.infrastructure.logging import configure_logging

    configure_logging()
