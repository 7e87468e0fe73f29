from __future__ import annotations

import mysql.connector
import pytest
from mysql.connector.constants import ClientFlag

from src.travel_checkin.travel_checkin.core.exceptions import PersistenceError
from src.travel_checkin.travel_checkin.database.connection import DatabaseConnection, DBConfig

CONFIG = DBConfig(host="db", port=3306, user="app", password="secret", database="travel_checkin_test")


def test_connect_asks_for_matched_row_counts(monkeypatch):
    captured = {}

    def fake_connect(**kwargs):
        captured.update(kwargs)
        return object()

    monkeypatch.setattr(mysql.connector, "connect", fake_connect)

    DatabaseConnection(CONFIG).connect()

    assert ClientFlag.FOUND_ROWS in captured["client_flags"]
    assert captured["database"] == "travel_checkin_test"


def test_connect_failure_becomes_persistence_error(monkeypatch):
    def refuse(**kwargs):
        raise mysql.connector.Error("refused")

    monkeypatch.setattr(mysql.connector, "connect", refuse)

    with pytest.raises(PersistenceError, match="Cannot connect"):
        DatabaseConnection(CONFIG).connect()
