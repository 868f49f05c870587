import pytest

from er_sketch.config import Config, DEFAULT_TITLE, get_config
from er_sketch.exceptions import ConfigError


def test_defaults():
    config = Config.from_env({})
    assert config.output_dir == "output"
    assert config.seed == 42
    assert config.title == DEFAULT_TITLE
    assert config.figsize == (10.0, 8.0)
    assert config.log_level == "INFO"
    assert config.default_output().replace("\\", "/") == "output/er_diagram.png"


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("ER_SKETCH_SEED", "7")
    monkeypatch.setenv("ER_SKETCH_FIGSIZE", "12, 6.5")
    monkeypatch.setenv("ER_SKETCH_NODE_COLOR", "#ffcc00")
    monkeypatch.setenv("ER_SKETCH_LOG_LEVEL", "debug")

    config = get_config()
    assert config.seed == 7
    assert config.figsize == (12.0, 6.5)
    assert config.node_color == "#ffcc00"
    assert config.log_level == "DEBUG"


def test_render_config_keys():
    render_config = Config(dpi=300).get_render_config()
    assert render_config == {
        "title": DEFAULT_TITLE,
        "node_color": "lightblue",
        "node_size": 6000,
        "figsize": (10.0, 8.0),
        "dpi": 300,
    }


@pytest.mark.parametrize("name, value", [
    ("ER_SKETCH_SEED", "abc"),
    ("ER_SKETCH_DPI", "1.5"),
    ("ER_SKETCH_FIGSIZE", "10"),
    ("ER_SKETCH_LOG_LEVEL", "LOUD"),
])
def test_invalid_values(name, value):
    with pytest.raises(ConfigError, match=name):
        Config.from_env({name: value})
