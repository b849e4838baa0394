import logging

import pytest

from tests.infrastructure import load_rfc_examples


@pytest.fixture(scope="session")
def rfc_variables():
    """Общие переменные примеров RFC 6570."""
    variables, _ = load_rfc_examples()
    return variables


@pytest.fixture(autouse=True)
def _uritpl_debug_logs(caplog):
    """Отладочные сообщения uritpl попадают в caplog каждого теста."""
    caplog.set_level(logging.DEBUG, logger="uritpl")
    yield
