# core/inout/plot_config.py
"""
Load and validate YAML plot configurations.

Example::

    range: {start: -10, end: 10, step: 0.5}
    graphs:
      - name: parabola
        expression: "x^2"
        color: "#8884d8"
      - expression: "sqrt(x)"
        range: {start: 0, end: 25, step: 0.25}
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from cerberus import Validator

from core.evaluation_types import DEFAULT_RANGE, GraphSpec, Range
from core.exceptions import ConfigError

logger = logging.getLogger(__name__)


RANGE_SCHEMA = {
    'start': {'type': 'float', 'required': True, 'coerce': float},
    'end': {'type': 'float', 'required': True, 'coerce': float},
    'step': {'type': 'float', 'required': True, 'coerce': float},
}

# Cerberus schema for plot configuration
PLOT_SCHEMA = {
    'range': {'type': 'dict', 'required': False, 'schema': RANGE_SCHEMA},
    'graphs': {
        'type': 'list',
        'required': True,
        'minlength': 1,
        'schema': {
            'type': 'dict',
            'schema': {
                'name': {'type': 'string', 'required': False, 'empty': False},
                'expression': {'type': 'string', 'required': True, 'empty': False},
                'color': {'type': 'string', 'required': False},
                'range': {'type': 'dict', 'required': False, 'schema': RANGE_SCHEMA},
            }
        }
    }
}


@dataclass
class PlotConfig:
    range: Range
    graphs: List[GraphSpec]


def _to_range(raw: Dict[str, float]) -> Range:
    rng = Range(start=raw['start'], end=raw['end'], step=raw['step'])
    if rng.is_degenerate():
        logger.warning("Range %s is empty; no points will be sampled.", rng)
    return rng


def parse_plot_config(raw: Any) -> PlotConfig:
    """
    Validate an already-loaded document and return a PlotConfig.

    Raises:
        ConfigError: If schema validation fails or graph names collide.
    """
    validator = Validator(PLOT_SCHEMA, allow_unknown=False)
    if not isinstance(raw, dict) or not validator.validate(raw):
        errors = validator.errors if isinstance(raw, dict) else "document must be a mapping"
        raise ConfigError(f"Plot schema validation errors: {errors}")
    doc: Dict[str, Any] = validator.document

    default_range = _to_range(doc['range']) if 'range' in doc else DEFAULT_RANGE

    graphs: List[GraphSpec] = []
    seen = set()
    for entry in doc['graphs']:
        name = entry.get('name', entry['expression'])
        if name in seen:
            raise ConfigError(f"Duplicate graph name '{name}'")
        seen.add(name)
        graphs.append(GraphSpec(
            name=name,
            expression=entry['expression'],
            range=_to_range(entry['range']) if 'range' in entry else None,
            color=entry.get('color'),
        ))

    return PlotConfig(range=default_range, graphs=graphs)


def load_plot_config(path: Union[str, Path]) -> PlotConfig:
    """
    Load a YAML plot configuration file, validate its schema, and return a PlotConfig.

    Raises:
        ConfigError: If file read fails or schema validation fails.
    """
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read plot YAML '{path}': {e}")
    return parse_plot_config(raw)
