import logging

import pytest

from algo_harness.errors import CredentialsParseError
from algo_harness.inputs.credentials import load_pgpass, parse_pgpass
from algo_harness.inputs.settings import DbSystem


def test_parse_pgpass_first_line():
    setting = parse_pgpass("host1:5432:mydb:alice:secret\nignored:1:2:3:4\n")

    assert setting.url == "postgres://host1:5432/mydb"
    assert setting.user == "alice"
    assert setting.password == "secret"
    assert setting.system is DbSystem.POSTGRESQL
    assert (setting.host, setting.port, setting.database) == ("host1", "5432", "mydb")


def test_password_may_contain_colons():
    setting = parse_pgpass("h:1:db:bob:pa:ss:word")

    assert setting.user == "bob"
    assert setting.password == "pa:ss:word"


def test_password_is_not_in_repr():
    setting = parse_pgpass("h:1:db:bob:hunter2")

    assert "hunter2" not in repr(setting)


def test_db_type_selects_url_scheme_and_system():
    setting = parse_pgpass("h:3306:shop:root:pw", "mysql")

    assert setting.url == "mysql://h:3306/shop"
    assert setting.system is DbSystem.MYSQL


def test_unknown_db_type_keeps_url_and_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="algo_harness.inputs.credentials"):
        setting = parse_pgpass("h:1:db:u:p", "oracle")

    assert setting.url == "oracle://h:1/db"
    assert setting.system is DbSystem.POSTGRESQL
    assert "Unknown database type" in caplog.text


@pytest.mark.parametrize("content", ["", "\n", "host:5432:db:user"])
def test_malformed_content_is_rejected(content):
    with pytest.raises(CredentialsParseError):
        parse_pgpass(content)


def test_load_pgpass_reads_file(tmp_path):
    path = tmp_path / "pgpass"
    path.write_text("db.example:5432:warehouse:etl:s3cret\n", encoding="utf-8")

    setting = load_pgpass(path)

    assert setting.url == "postgres://db.example:5432/warehouse"


def test_load_pgpass_missing_file(tmp_path):
    with pytest.raises(CredentialsParseError, match="Could not load PGPass file"):
        load_pgpass(tmp_path / "missing")
