import pytest

from src.tutoring_attendance.tutoring_attendance.database.connection import DBConfig, DatabaseConnection


@pytest.fixture(autouse=True)
def _fresh_singleton():
    DatabaseConnection.reset_instance()
    yield
    DatabaseConnection.reset_instance()


def test_from_settings_applies_defaults():
    config = DBConfig.from_settings({"database": "ta", "port": "3307"})
    assert config == DBConfig(host="localhost", port=3307, user="root", password="", database="ta", pool_size=0)
    assert "pool_size" not in config.connect_kwargs()


def test_singleton_is_shared_until_config_changes():
    a = DatabaseConnection.get_instance(DBConfig.from_settings({"database": "one"}))
    assert DatabaseConnection.get_instance(DBConfig.from_settings({"database": "one"})) is a
    b = DatabaseConnection.get_instance(DBConfig.from_settings({"database": "two"}))
    assert b is not a
    assert b.config.database == "two"
