import logging

import pytest

from skynav.utils.log_util import level_from_name, log_io


@pytest.mark.parametrize("value, expected", [
    ("debug", logging.DEBUG),
    (" INFO ", logging.INFO),
    ("Warning", logging.WARNING),
    ("10", 10),
    (logging.ERROR, logging.ERROR),
    ("nonsense", logging.INFO),
    (None, logging.INFO),
    (True, logging.INFO),
])
def test_level_from_name(value, expected):
    assert level_from_name(value) == expected


def test_level_from_name_custom_default():
    assert level_from_name("??", default=logging.ERROR) == logging.ERROR


class Target:
    @log_io()
    def combine(self, a, b=2, token=None):
        return a + b

    @log_io(mask=("token",))
    def login(self, user, token):
        return user

    @log_io()
    def fail(self):
        raise KeyError("missing")


def test_log_io_logs_arguments_and_result(caplog):
    with caplog.at_level(logging.DEBUG, logger="skynav"):
        assert Target().combine(1, b=5) == 6

    assert "combine(a=1, b=5)" in caplog.text
    assert "= 6" in caplog.text
    assert "self=" not in caplog.text


def test_log_io_masks_arguments(caplog):
    with caplog.at_level(logging.DEBUG, logger="skynav"):
        Target().login("ann", token="secret")

    assert "secret" not in caplog.text
    assert "token=***" in caplog.text


def test_log_io_reraises_and_logs(caplog):
    with caplog.at_level(logging.DEBUG, logger="skynav"):
        with pytest.raises(KeyError):
            Target().fail()

    assert "Exception in" in caplog.text


def test_log_io_silent_above_level(caplog):
    with caplog.at_level(logging.INFO, logger="skynav"):
        Target().combine(1)

    assert "combine" not in caplog.text
