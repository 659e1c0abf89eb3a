import pytest
import yaml
from core.evaluation_types import DEFAULT_RANGE, Range
from core.exceptions import ConfigError
from core.inout.plot_config import load_plot_config, parse_plot_config


def write_yaml(tmp_path, data, name="plot.yml"):
    path = tmp_path / name
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


def test_load_full_config(tmp_path):
    path = write_yaml(tmp_path, {
        "range": {"start": -1, "end": 1, "step": 0.5},
        "graphs": [
            {"name": "parabola", "expression": "x^2", "color": "#8884d8"},
            {"expression": "sqrt(x)", "range": {"start": 0, "end": 4, "step": 1}},
        ]
    })
    config = load_plot_config(path)
    assert config.range == Range(-1.0, 1.0, 0.5)
    assert isinstance(config.range.start, float)
    parabola, root = config.graphs
    assert parabola.name == "parabola"
    assert parabola.color == "#8884d8"
    assert parabola.range is None
    # Name defaults to the expression text.
    assert root.name == "sqrt(x)"
    assert root.range == Range(0.0, 4.0, 1.0)


def test_range_defaults_to_graphing_tool_range():
    config = parse_plot_config({"graphs": [{"expression": "x"}]})
    assert config.range == DEFAULT_RANGE


def test_numeric_strings_are_coerced():
    config = parse_plot_config({
        "range": {"start": "0", "end": "2.5", "step": "0.5"},
        "graphs": [{"expression": "x"}],
    })
    assert config.range == Range(0.0, 2.5, 0.5)


@pytest.mark.parametrize("raw", [
    {"graphs": []},
    {"graphs": [{"name": "no expression"}]},
    {"graphs": [{"expression": ""}]},
    {"graphs": [{"expression": "x", "style": "dashed"}]},
    {"graphs": [{"expression": "x"}], "range": {"start": 0, "end": 1}},
    {"graphs": [{"expression": "x"}], "range": {"start": "a", "end": 1, "step": 1}},
    {"range": {"start": 0, "end": 1, "step": 1}},
    ["x^2"],
    None,
])
def test_invalid_documents(raw):
    with pytest.raises(ConfigError, match="validation"):
        parse_plot_config(raw)


def test_duplicate_names(tmp_path):
    path = write_yaml(tmp_path, {"graphs": [{"expression": "x"}, {"expression": "x"}]})
    with pytest.raises(ConfigError, match="Duplicate graph name 'x'"):
        load_plot_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Failed to read"):
        load_plot_config(tmp_path / "missing.yml")


def test_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("graphs: [unclosed\n")
    with pytest.raises(ConfigError, match="Failed to read"):
        load_plot_config(path)


def test_empty_range_warns(dummy_logger):
    parse_plot_config({"graphs": [{"expression": "x", "range": {"start": 1, "end": 0, "step": 1}}]})
    assert "is empty" in dummy_logger.text
