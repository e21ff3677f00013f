import pytest

from rmstrokes.config import Config, ConfigError, RenderConfig, load_config


def write(tmp_path, text):
    path = tmp_path / "rmstrokes.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "missing.toml") == Config()
    assert load_config(None) == Config()


def test_load_values(tmp_path):
    path = write(tmp_path, """
[render]
page_width = 1620
bottom_margin = 0
background = "#fafafa"
x_offset = -810.0

[logging]
level = "debug"
""")
    config = load_config(path)
    assert config.render == RenderConfig(
        page_width=1620, bottom_margin=0, background="#fafafa", x_offset=-810.0,
    )
    assert config.log_level == "DEBUG"


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = write(tmp_path, "[render]\nzoom = 2\n")
    assert load_config(path).render == RenderConfig()
    assert "zoom" in caplog.text


@pytest.mark.parametrize("text", [
    "[render]\npage_width = \"wide\"\n",
    "[render]\nbackground = 1\n",
    "[render]\nx_offset = true\n",
    "[logging]\nlevel = \"LOUD\"\n",
    "[render\n",
])
def test_invalid_values(tmp_path, text):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, text))
