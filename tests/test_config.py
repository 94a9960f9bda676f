import pytest

from cmakelists_edit.config import Config, _find_config_file


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("SORT", "CREATE_BLOCKS", "DEFAULT_SECTION",
                "DEFAULT_SEPARATOR", "DEFAULT_TARGET"):
        monkeypatch.delenv("CMAKELISTS_EDIT_" + key, raising=False)


def test_defaults():
    cfg = Config()
    assert cfg.SORT is False
    assert cfg.CREATE_BLOCKS is True
    assert cfg.DEFAULT_SECTION == "PRIVATE"
    assert cfg.DEFAULT_SEPARATOR == "\n    "
    assert cfg.DEFAULT_TARGET is None
    assert cfg.SECTION_HINTS == {}


def test_yaml_values():
    cfg = Config({
        "sort": True,
        "create_blocks": False,
        "default_section": "public",
        "default_target": "app",
    })
    assert cfg.SORT is True
    assert cfg.CREATE_BLOCKS is False
    assert cfg.DEFAULT_SECTION == "PUBLIC"
    assert cfg.DEFAULT_TARGET == "app"


def test_invalid_default_section_falls_back():
    assert Config({"default_section": "SOURCES"}).DEFAULT_SECTION == "PRIVATE"


def test_env_overrides_yaml(monkeypatch):
    monkeypatch.setenv("CMAKELISTS_EDIT_SORT", "yes")
    monkeypatch.setenv("CMAKELISTS_EDIT_DEFAULT_TARGET", "tool")
    cfg = Config({"sort": False, "default_target": "app"})
    assert cfg.SORT is True
    assert cfg.DEFAULT_TARGET == "tool"


def test_env_false_value(monkeypatch):
    monkeypatch.setenv("CMAKELISTS_EDIT_CREATE_BLOCKS", "0")
    assert Config().CREATE_BLOCKS is False


def test_section_hints_are_filtered():
    cfg = Config({"section_hints": {
        "header": "public",
        "ui": "SOURCES",
        "qml": "Interface",
    }})
    assert cfg.SECTION_HINTS == {"header": "PUBLIC", "qml": "INTERFACE"}
    assert cfg.section_for_kind("header") == "PUBLIC"
    assert cfg.section_for_kind("source") is None
    assert cfg.section_for_kind(None) is None


def test_load_from_explicit_path(tmp_path):
    path = tmp_path / "edit.yaml"
    path.write_text("sort: true\nsection_hints:\n  header: PUBLIC\n")
    cfg = Config.load(str(path))
    assert cfg.SORT is True
    assert cfg.SECTION_HINTS == {"header": "PUBLIC"}


def test_load_missing_explicit_path(tmp_path):
    cfg = Config.load(str(tmp_path / "missing.yaml"))
    assert cfg.SORT is False


def test_load_invalid_yaml(tmp_path):
    path = tmp_path / "edit.yaml"
    path.write_text("sort: [unclosed\n")
    assert Config.load(str(path)).SORT is False


def test_non_mapping_yaml_is_ignored(tmp_path):
    path = tmp_path / "edit.yaml"
    path.write_text("- just\n- a list\n")
    assert Config.load(str(path)).DEFAULT_SECTION == "PRIVATE"


def test_find_config_file_in_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    assert _find_config_file() is None
    (tmp_path / ".cmakelists-edit.yml").write_text("sort: true\n")
    assert _find_config_file() == str(tmp_path / ".cmakelists-edit.yml")
    assert Config.load().SORT is True
