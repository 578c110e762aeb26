# confmatrix/utils/config.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..data.normalization import validate_target_range
from ..evaluation.metrics import Average


def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping/dict, got {type(data)}")
    return data


def get_section(cfg: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    out: Dict[str, Any] = cfg
    for k in keys:
        v = out.get(k, {})
        if v is None:
            v = {}
        if not isinstance(v, dict):
            raise ValueError(f"Config section {'.'.join(keys)} must be a dict")
        out = v
    return out


def parse_average(value: Any) -> Average:
    if isinstance(value, Average):
        return value
    try:
        return Average(str(value).strip().lower())
    except ValueError:
        names = ", ".join(a.value for a in Average)
        raise ValueError(f"Unknown average {value!r}; expected one of: {names}") from None


@dataclass(frozen=True)
class EvaluationSettings:
    """
    Defaults for reports and normalization.

    YAML layout:

        evaluation:
          averages: [micro, macro, weighted]
          normalize:
            min: 0.0
            max: 1.0
          fraction_digits: 4
    """
    averages: Tuple[Average, ...] = (Average.MICRO, Average.MACRO, Average.WEIGHTED)
    normalize_min: float = 0.0
    normalize_max: float = 1.0
    fraction_digits: Optional[int] = None

    def __post_init__(self) -> None:
        validate_target_range(self.normalize_min, self.normalize_max, self.fraction_digits)

    @staticmethod
    def from_config(cfg: Dict[str, Any]) -> "EvaluationSettings":
        section = get_section(cfg, "evaluation")
        norm = get_section(cfg, "evaluation", "normalize")
        defaults = EvaluationSettings()

        averages = section.get("averages")
        return EvaluationSettings(
            averages=tuple(parse_average(a) for a in averages) if averages is not None else defaults.averages,
            normalize_min=float(norm.get("min", defaults.normalize_min)),
            normalize_max=float(norm.get("max", defaults.normalize_max)),
            fraction_digits=section.get("fraction_digits", defaults.fraction_digits),
        )


def load_settings(path: str | Path) -> EvaluationSettings:
    return EvaluationSettings.from_config(load_yaml(path))
