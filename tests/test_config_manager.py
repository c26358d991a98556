import pytest

from filetransfer.config_manager import ConfigManager


@pytest.fixture
def cfg():
    return ConfigManager()


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "app.conf"
    path.write_text(
        "# comment = ignored\n"
        "\n"
        "name = server \n"
        "  port=8080\n"
        "noequals\n"
        "empty =\n"
        "\tflag\t= yes\n",
        encoding="utf-8",
    )
    return path


def test_load_parses_key_value_lines(cfg, sample_file):
    cfg.load(sample_file)
    assert cfg.get_string("name") == "server"
    assert cfg.get_int("port") == 8080
    assert cfg.get_bool("flag") is True
    assert "noequals" not in cfg
    assert "# comment" not in cfg
    assert cfg.config_file == str(sample_file)


def test_empty_value_is_stored_but_numeric_getters_default(cfg, sample_file):
    cfg.load(sample_file)
    assert "empty" in cfg
    assert cfg.get_string("empty", "fallback") == ""
    assert cfg.get_int("empty", 7) == 7
    assert cfg.get_bool("empty", True) is True


def test_missing_key_returns_default(cfg):
    assert cfg.get_string("absent", "fallback") == "fallback"
    assert cfg.get_int("absent", 12) == 12
    assert cfg.get_float("absent", 0.25) == 0.25


def test_get_int_reads_leading_integer(cfg):
    cfg.set("n", "42abc")
    cfg.set("neg", "  -17")
    cfg.set("bad", "abc")
    cfg.set("huge", "99999999999")
    assert cfg.get_int("n") == 42
    assert cfg.get_int("neg") == -17
    assert cfg.get_int("bad", 5) == 5
    assert cfg.get_int("huge", 5) == 5


def test_get_float_reads_leading_number(cfg):
    cfg.set("f", "2.5x")
    cfg.set("exp", "1e3")
    cfg.set("bad", "nope")
    cfg.set("huge", "1e999")
    assert cfg.get_float("f") == 2.5
    assert cfg.get_float("exp") == 1e3
    assert cfg.get_float("bad", 9.0) == 9.0
    assert cfg.get_float("huge", 9.0) == 9.0


@pytest.mark.parametrize("text", ["true", "YES", "1", "On"])
def test_get_bool_true_words(cfg, text):
    cfg.set("b", text)
    assert cfg.get_bool("b", False) is True


@pytest.mark.parametrize("text", ["false", "No", "0", "OFF"])
def test_get_bool_false_words(cfg, text):
    cfg.set("b", text)
    assert cfg.get_bool("b", True) is False


def test_get_bool_unknown_word_gives_default(cfg):
    cfg.set("b", "maybe")
    assert cfg.get_bool("b", True) is True
    assert cfg.get_bool("b", False) is False


def test_set_converts_values_to_text(cfg):
    cfg.set("b", True)
    cfg.set("i", 3)
    cfg.set("f", 1.5)
    assert cfg.get_string("b") == "true"
    assert cfg.get_string("i") == "3"
    assert cfg.get_string("f") == "1.500000"
    assert cfg.get_float("f") == 1.5


def test_set_rejects_other_types(cfg):
    with pytest.raises(TypeError):
        cfg.set("x", [1, 2])


def test_remove_and_clear(cfg):
    cfg.set("a", "1")
    cfg.set("b", "2")
    assert cfg.remove("a") is True
    assert cfg.remove("a") is False
    assert "a" not in cfg
    cfg.clear()
    assert "b" not in cfg


def test_save_writes_sorted_lines_and_round_trips(cfg, tmp_path):
    path = tmp_path / "out.conf"
    cfg.set("beta", "two")
    cfg.set("alpha", 1)
    cfg.save(path)
    assert path.read_text(encoding="utf-8") == "alpha = 1\nbeta = two\n"
    other = ConfigManager()
    other.load(path)
    assert other.get_int("alpha") == 1
    assert other.get_string("beta") == "two"


def test_save_without_path_uses_loaded_file(cfg, sample_file):
    cfg.load(sample_file)
    cfg.set("name", "changed")
    cfg.save()
    reloaded = ConfigManager()
    reloaded.load(sample_file)
    assert reloaded.get_string("name") == "changed"
    assert reloaded.get_int("port") == 8080


def test_save_without_any_path_raises(cfg):
    cfg.set("a", "1")
    with pytest.raises(ValueError):
        cfg.save()


def test_load_missing_file_raises_and_clears(cfg, tmp_path):
    cfg.set("x", "1")
    with pytest.raises(FileNotFoundError):
        cfg.load(tmp_path / "missing.conf")
    assert "x" not in cfg


def test_instance_is_shared():
    first = ConfigManager.instance()
    second = ConfigManager.instance()
    first.set("shared_probe_key", "shared value")
    try:
        assert second.get_string("shared_probe_key") == "shared value"
        assert "shared_probe_key" in second
    finally:
        first.remove("shared_probe_key")
    assert "shared_probe_key" not in second