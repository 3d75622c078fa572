import os
import socket
import sqlite3
import sys
import urllib.request
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC = REPO_ROOT / "src"

# Prefer repo sources over any installed package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    if os.getenv("LIVE") == "1":
        return

    real_connect = socket.socket.connect

    def guarded_connect(sock, address):
        host = address[0]
        if host not in ("127.0.0.1", "localhost"):
            raise RuntimeError("Network access blocked in tests")
        return real_connect(sock, address)

    monkeypatch.setattr(socket.socket, "connect", guarded_connect)
    monkeypatch.setattr(
        urllib.request,
        "urlopen",
        lambda *args, **kwargs: (_ for _ in ()).throw(
            RuntimeError("Network access blocked in tests")
        ),
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    from miacasa_site.config import reset_settings_cache

    for name in list(os.environ):
        if name.startswith("MIACASA_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MIACASA_DB_PATH", str(tmp_path / "site.sqlite"))
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "site.sqlite")


@pytest.fixture
def conn(db_path):
    from miacasa_site.db import connect, ensure_schema

    c = connect(db_path)
    ensure_schema(c)
    try:
        yield c
    finally:
        c.close()


def insert_row(c: sqlite3.Connection, table: str, **values):
    cols = list(values.keys())
    c.execute(
        f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({', '.join(['?'] * len(cols))})",
        [values[k] for k in cols],
    )
    c.commit()


@pytest.fixture
def insert(conn):
    def _insert(table: str, **values):
        insert_row(conn, table, **values)

    return _insert
