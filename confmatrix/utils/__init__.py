"""
Utility subpackage.

Includes:
- logging: consistent logging to console and optionally to file
- config: YAML loading and evaluation settings
"""

from .logging import get_logger, configure_logging, log_classification_report
from .config import load_yaml, get_section, parse_average, EvaluationSettings, load_settings

__all__ = [
    "get_logger",
    "configure_logging",
    "log_classification_report",
    "load_yaml",
    "get_section",
    "parse_average",
    "EvaluationSettings",
    "load_settings",
]
