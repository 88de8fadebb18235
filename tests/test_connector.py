import logging
import sys

import pytest

from db2_browser.db import ConnectionParams, Connector, build_connection_string
from db2_browser.errors import ConnectionError

from conftest import FakeDriver


def make_params(host: str = "db2.example.com") -> ConnectionParams:
    return ConnectionParams(
        host=host, port="50000", database="SAMPLE", user="db2inst1", password="s3cret"
    )


def test_connection_string() -> None:
    assert build_connection_string(make_params()) == (
        "DATABASE=SAMPLE;HOSTNAME=db2.example.com;PORT=50000;"
        "PROTOCOL=TCPIP;"
    )


def test_credentials_passed_outside_connection_string(driver: FakeDriver) -> None:
    params = ConnectionParams(
        host="db2.example.com",
        port="50000",
        database="SAMPLE",
        user="db2inst1",
        password="pa;ss=PWD;x",
    )
    connector = Connector(driver_loader=lambda: driver)

    connector.connect(params)

    assert driver.credentials == [("db2inst1", "pa;ss=PWD;x")]
    assert driver.connection_strings == [build_connection_string(params)]
    assert "pa;ss" not in driver.connection_strings[0]
    assert "UID=" not in driver.connection_strings[0]


def test_params_repr_hides_password() -> None:
    params = make_params()
    assert "s3cret" not in repr(params)
    assert params.is_complete()
    assert not ConnectionParams("h", "", "db", "u", "p").is_complete()


def test_connect_reports_phases(driver: FakeDriver, statuses: list[str]) -> None:
    connector = Connector(status=statuses.append, driver_loader=lambda: driver)

    session = connector.connect(make_params())

    assert session.is_open
    assert session.target == "db2://db2.example.com:50000/SAMPLE"
    assert statuses == ["Connecting", "Connected"]
    assert "s3cret" not in repr(session)


def test_failed_connect_leaves_no_session(statuses: list[str]) -> None:
    driver = FakeDriver(connect_error=Exception("SQL30081N  A communication error"))
    connector = Connector(status=statuses.append, driver_loader=lambda: driver)

    with pytest.raises(ConnectionError, match="SQL30081N") as excinfo:
        connector.connect(make_params(host="nowhere.invalid"))

    assert excinfo.value.__cause__ is not None
    assert statuses == ["Connecting", "Error: SQL error"]
    assert driver.closed == []

    driver.connect_error = None
    session = connector.connect(make_params())
    assert session.is_open


def test_falsy_handle_is_connection_error(statuses: list[str]) -> None:
    driver = FakeDriver()
    driver.connect = lambda *args: None
    connector = Connector(status=statuses.append, driver_loader=lambda: driver)

    with pytest.raises(ConnectionError, match="connection refused"):
        connector.connect(make_params())


def test_missing_driver(monkeypatch: pytest.MonkeyPatch, statuses: list[str]) -> None:
    # a None entry makes "import ibm_db" raise ImportError
    monkeypatch.setitem(sys.modules, "ibm_db", None)
    connector = Connector(status=statuses.append)

    with pytest.raises(ConnectionError, match="ibm_db is not available"):
        connector.connect(make_params())
    assert statuses[-1].startswith("Error: ")


def test_close_is_idempotent(driver: FakeDriver) -> None:
    connector = Connector(driver_loader=lambda: driver)
    session = connector.connect(make_params())

    connector.close(session)
    connector.close(session)
    session.close()
    connector.close(None)

    assert len(driver.closed) == 1
    assert not session.is_open


def test_close_failure_is_reported_not_raised(
    driver: FakeDriver, statuses: list[str], caplog: pytest.LogCaptureFixture
) -> None:
    connector = Connector(status=statuses.append, driver_loader=lambda: driver)
    session = connector.connect(make_params())
    driver.close_error = Exception("SQL1224N  The database manager is not able to accept")

    with caplog.at_level(logging.ERROR, logger="db2_browser.db.connector"):
        connector.close(session)

    assert statuses[-1] == "Error: Error closing the connection."
    assert caplog.records[-1].exc_info is not None
    assert not session.is_open
