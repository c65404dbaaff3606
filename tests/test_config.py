import os
import re
import stat

import pytest

from src.config import Config, WorkflowContext
from src.defaults import (DEFAULT_BACKUP_PATH, DEFAULT_DESTINATION_PATH,
                          DEFAULT_TARGET_PATH)
from src.utility import (find_config_path, get_config_options, load_config,
                         merge_options, save_config)


def test_exception_if_missing_config_file():
    missing_config_file = "missing_config.yaml"
    with pytest.raises(FileNotFoundError, match=f"Specified configuration file {missing_config_file} does not exist"):
        load_config(missing_config_file)


def test_load_default_config_file():
    # A call without a file returns the defaults with every key present
    config = load_config(None)
    assert config is not None
    assert len(config.__dict__) == 9
    assert config.target_path == DEFAULT_TARGET_PATH
    assert config.backup_path == DEFAULT_BACKUP_PATH
    assert config.destination_path == DEFAULT_DESTINATION_PATH
    assert config.tmp_dir == os.path.join(os.path.expanduser('~'), 'Pictures', 'tmp')


def test_load_user_config_file(tmp_path):
    user_config_file = tmp_path / "user_config.yaml"
    user_config_file.write_text(
        "target_path: /Volumes/card\n"
        "destination_path: /Volumes/archive\n"
        "tmp_dir: ~/staging\n")
    config = load_config(user_config_file)
    assert len(config.__dict__) == 9
    assert config.config_file == user_config_file
    assert config.target_path == "/Volumes/card"
    assert config.destination_path == "/Volumes/archive"
    assert config.tmp_dir == os.path.join(os.path.expanduser('~'), 'staging')
    # Absent keys keep their defaults
    assert config.backup_path == DEFAULT_BACKUP_PATH


def test_load_empty_config_file(tmp_path):
    empty_config_file = tmp_path / "empty_config_file.yaml"
    open(empty_config_file, "w").close()
    config = load_config(empty_config_file)
    assert config is not None
    assert config.target_path == DEFAULT_TARGET_PATH


def test_load_invalid_config_file(tmp_path):
    invalid_config_file = tmp_path / "invalid_config_file.yaml"
    invalid_config_file.write_text("target_path: [unclosed\n")
    with pytest.raises(RuntimeError,
                       match=re.escape(
                           f"Invalid YAML in {invalid_config_file}.  Please verify syntax of YAML content."
                       )):
        load_config(invalid_config_file)


def test_load_non_mapping_config_file(tmp_path):
    list_config_file = tmp_path / "list_config_file.yaml"
    list_config_file.write_text("- one\n- two\n")
    with pytest.raises(RuntimeError, match="Expected a mapping"):
        load_config(list_config_file)


def test_save_and_reload_config(tmp_path):
    config_file = tmp_path / "config.yaml"
    config = Config(target_path="/Volumes/test-target",
                    backup_path="/Volumes/test-backup",
                    destination_path="/Volumes/test-dest",
                    tmp_dir=str(tmp_path / "tmp"))
    save_config(config, config_file)

    assert stat.S_IMODE(os.stat(config_file).st_mode) == 0o600
    loaded = load_config(config_file)
    assert loaded.target_path == config.target_path
    assert loaded.backup_path == config.backup_path
    assert loaded.destination_path == config.destination_path
    assert loaded.tmp_dir == config.tmp_dir


def test_find_config_path_prefers_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    assert find_config_path() is None

    user_config = tmp_path / "home" / ".config" / "rename-sony-photos" / "config.yaml"
    user_config.parent.mkdir(parents=True)
    user_config.write_text("target_path: /Volumes/user\n")
    assert find_config_path() == str(user_config)

    (tmp_path / "config.yaml").write_text("target_path: /test\n")
    assert find_config_path() == "config.yaml"


def test_get_config_options_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    config = get_config_options(Config())
    assert config.target_path == DEFAULT_TARGET_PATH
    assert config.config_file is None


def test_get_config_options_uses_explicit_file(tmp_path):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("target_path: /Volumes/custom\n")
    config = get_config_options(Config(config_file=str(config_file)))
    assert config.target_path == "/Volumes/custom"


def test_merge_options_overrides_win():
    merged = merge_options(Config(target_path="/a"), Config(target_path="/b", dry_run=True))
    assert merged.target_path == "/b"
    assert merged.dry_run is True


def test_context_is_read_only():
    context = Config(dry_run=True).context()
    assert isinstance(context, WorkflowContext)
    assert context.dry_run is True
    with pytest.raises(AttributeError):
        context.target_path = "/elsewhere"


@pytest.mark.parametrize("content", [
    "target_path: *undefined\n",
    "target_path: !!python/name:os.system\n",
])
def test_load_config_rejects_unresolvable_yaml(tmp_path, content):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(content)
    with pytest.raises(RuntimeError,
                       match=re.escape(
                           f"Invalid YAML in {config_file}.  Please verify syntax of YAML content."
                       )):
        load_config(config_file)
