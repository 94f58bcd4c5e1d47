import json

import pytest

from webmconvert.utils import config_store
from webmconvert.utils.config_store import AppConfig, apply_env_fallback, config_path, load_or_init
from webmconvert.utils.errors import StorageError


def _records(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_first_load_creates_exactly_one_record(tmp_path):
    path = tmp_path / "nested" / ".webm-convert.json"

    first = load_or_init(path, expected_version=2)
    assert path.exists()
    assert _records(path) == [
        {"version": 2, "notification_token": "", "notification_recipients": []}
    ]

    second = load_or_init(path, expected_version=2)
    assert second == first
    assert len(_records(path)) == 1


def test_empty_file_is_treated_as_no_records(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("", encoding="utf-8")

    config = load_or_init(path, expected_version=2)
    assert config == AppConfig(version=2)
    assert len(_records(path)) == 1


def test_file_is_pretty_printed(tmp_path):
    path = tmp_path / "config.json"
    load_or_init(path, expected_version=2)
    assert '\n  {\n    "version": 2' in path.read_text(encoding="utf-8")


def test_other_version_record_is_kept_untouched(tmp_path):
    path = tmp_path / "config.json"
    legacy = {"version": 1, "pushover_token": "tok", "pushover_user": "usr"}
    path.write_text(json.dumps([legacy]), encoding="utf-8")

    config = load_or_init(path, expected_version=2)

    assert config.version == 2
    assert config.notification_token == ""
    records = _records(path)
    assert records[0] == legacy
    assert records[1]["version"] == 2
    assert len(records) == 2


def test_existing_record_is_returned(tmp_path):
    path = tmp_path / "config.json"
    record = {"version": 2, "notification_token": "abc", "notification_recipients": ["u1", "u2"]}
    path.write_text(json.dumps([record]), encoding="utf-8")
    before = path.read_text(encoding="utf-8")

    config = load_or_init(path, expected_version=2)

    assert config.notification_token == "abc"
    assert config.notification_recipients == ("u1", "u2")
    assert path.read_text(encoding="utf-8") == before


@pytest.mark.parametrize("content", [
    "{not json",
    '{"version": 2}',
    "[1, 2]",
    '[{"version": 2, "notification_token": "t", "notification_recipients": 5}]',
    '[{"version": 2, "notification_token": "t", "notification_recipients": {"a": 1}}]',
    '[{"version": 2, "notification_token": "t", "notification_recipients": ["u", 7]}]',
    '[{"version": 2, "notification_token": 42, "notification_recipients": ["u"]}]',
])
def test_corrupt_file_raises_storage_error(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError):
        load_or_init(path, expected_version=2)
    assert path.read_text(encoding="utf-8") == content


def test_unreadable_path_raises_storage_error(tmp_path):
    path = tmp_path / "is-a-directory"
    path.mkdir()
    with pytest.raises(StorageError):
        load_or_init(path, expected_version=2)


def test_config_path_honours_env(monkeypatch, tmp_path):
    monkeypatch.setenv("WEBM_CONVERT_CONFIG", str(tmp_path / "custom.json"))
    assert config_path() == tmp_path / "custom.json"

    monkeypatch.delenv("WEBM_CONVERT_CONFIG")
    monkeypatch.setattr(config_store.Path, "home", lambda: tmp_path)
    assert config_path() == tmp_path / ".webm-convert.json"


def test_env_fallback_fills_blank_credentials(monkeypatch):
    monkeypatch.setenv("PUSHOVER_TOKEN", "envtok")
    monkeypatch.setenv("PUSHOVER_USER", "a, b,,")

    config = apply_env_fallback(AppConfig(version=2))

    assert config.notification_token == "envtok"
    assert config.notification_recipients == ("a", "b")


def test_env_fallback_keeps_stored_credentials(monkeypatch):
    monkeypatch.setenv("PUSHOVER_TOKEN", "envtok")
    stored = AppConfig(version=2, notification_token="tok", notification_recipients=("u",))
    assert apply_env_fallback(stored) is stored


def test_env_fallback_without_env_is_noop():
    blank = AppConfig(version=2)
    assert apply_env_fallback(blank) is blank
