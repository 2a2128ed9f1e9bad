import logging

from ircengine.errors import (
    ConfigError,
    MalformedLineError,
    NoServerError,
    TransportError,
    error_category,
    log_error,
    wrap_transport_error,
)


def test_error_categories():
    assert error_category(TransportError("x")) == "network"
    assert error_category(ConnectionResetError()) == "network"
    assert error_category(NoServerError()) == "config"
    assert error_category(ConfigError("bad")) == "config"
    assert error_category(MalformedLineError("PING", "no token")) == "parsing"
    assert error_category(ValueError()) == "unknown"


def test_no_server_message():
    assert str(NoServerError()) == "No server set."


def test_wrap_transport_error_keeps_endpoint():
    err = wrap_transport_error(ConnectionRefusedError("refused"), host="h", port=1)
    assert isinstance(err, TransportError)
    assert err.data == {"host": "h", "port": 1, "cause": "ConnectionRefusedError"}
    assert wrap_transport_error(err, host="x", port=2) is err


def test_log_error_structured(caplog):
    caplog.set_level(logging.ERROR)
    err = TransportError("boom", data={"host": "h"})
    log_error("Read failed", err, {"attempt": 2})
    msg = caplog.records[0].getMessage()
    assert msg.startswith("[NETWORK] Read failed: boom")
    assert "Exception: TransportError: boom" in msg
    assert "host=h" in msg and "attempt=2" in msg
