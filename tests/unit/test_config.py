"""
Unit tests for student_persist/config.py

No real configuration on the host is read — every test writes its own
properties file under tmp_path and clears STUDENT_DATA_PATH.
"""

import logging

import pytest

from student_persist.config import ENV_DATA_PATH, StoreConfig, load_config
from student_persist.exceptions import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv(ENV_DATA_PATH, raising=False)


def _props(tmp_path, text: str) -> str:
    path = tmp_path / "config.properties"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestStoreConfigDefaults:

    def test_defaults(self):
        cfg = StoreConfig()
        assert cfg.storage_dir == ""
        assert cfg.encoding == "utf-8"
        assert cfg.atomic_updates is True


class TestLoadConfig:

    def test_reads_student_data_path(self, tmp_path):
        path = _props(tmp_path, "# comment\nstudent_data_path=/data/students/\n")
        assert load_config(path).storage_dir == "/data/students/"

    def test_colon_delimiter_and_bang_comment(self, tmp_path):
        path = _props(tmp_path, "! legacy comment\nstudent_data_path: /srv/st/\n")
        assert load_config(path).storage_dir == "/srv/st/"

    def test_optional_keys(self, tmp_path):
        path = _props(
            tmp_path,
            "student_data_path=/d/\n"
            "student_data_encoding=latin-1\n"
            "student_atomic_updates=false\n",
        )
        cfg = load_config(path)
        assert cfg.encoding == "latin-1"
        assert cfg.atomic_updates is False

    def test_missing_key_gives_empty_storage_dir(self, tmp_path):
        path = _props(tmp_path, "other=1\n")
        assert load_config(path).storage_dir == ""

    def test_missing_file_logs_critical_and_returns_defaults(self, tmp_path, caplog):
        with caplog.at_level(logging.CRITICAL, logger="student_persist.config"):
            cfg = load_config(str(tmp_path / "absent.properties"))
        assert cfg == StoreConfig()
        assert "Config file not found" in caplog.text

    def test_undecodable_file_logs_critical_and_returns_defaults(self, tmp_path, caplog):
        path = tmp_path / "config.properties"
        path.write_bytes(b"student_data_path=/a/\xff\xfe\n")
        with caplog.at_level(logging.CRITICAL, logger="student_persist.config"):
            cfg = load_config(str(path))
        assert cfg.storage_dir == ""
        assert "Failed to load config properties" in caplog.text

    def test_duplicate_key_last_value_wins(self, tmp_path):
        path = _props(tmp_path, "student_data_path=/a/\nstudent_data_path=/b/\n")
        assert load_config(path).storage_dir == "/b/"

    def test_key_without_value_is_empty(self, tmp_path):
        path = _props(tmp_path, "student_data_path\n")
        assert load_config(path).storage_dir == ""

    def test_backslash_escapes_are_unescaped(self, tmp_path):
        path = _props(tmp_path, "student_data_path=C:\\\\data\\\\\n")
        assert load_config(path).storage_dir == "C:\\data\\"

    def test_unicode_escape(self, tmp_path):
        path = _props(tmp_path, "student_data_path=/d\\u00e9/\n")
        assert load_config(path).storage_dir == "/dé/"

    def test_line_continuation(self, tmp_path):
        path = _props(tmp_path, "student_data_path=/var/lib/\\\n    students/\n")
        assert load_config(path).storage_dir == "/var/lib/students/"

    def test_unknown_encoding_raises_config_error(self, tmp_path):
        path = _props(tmp_path, "student_data_path=/d/\nstudent_data_encoding=bogus\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_store_config_rejects_unknown_encoding(self):
        with pytest.raises(ConfigError):
            StoreConfig(encoding="bogus")

    def test_bad_boolean_raises_config_error(self, tmp_path):
        path = _props(tmp_path, "student_data_path=/d/\nstudent_atomic_updates=maybe\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = _props(tmp_path, "student_data_path=/from/file/\n")
        monkeypatch.setenv(ENV_DATA_PATH, "/from/env/")
        assert load_config(path).storage_dir == "/from/env/"

    def test_env_used_when_file_missing(self, tmp_path, monkeypatch):
        monkeypatch.setenv(ENV_DATA_PATH, "/from/env/")
        assert load_config(str(tmp_path / "absent.properties")).storage_dir == "/from/env/"

    def test_default_path_is_cwd_config_properties(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.properties").write_text("student_data_path=./recs/\n", encoding="utf-8")
        assert load_config().storage_dir == "./recs/"
