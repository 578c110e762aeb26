# tests/test_utils.py
from __future__ import annotations

import logging

import pytest

from confmatrix import Average, EvaluationSettings, InvalidRangeError
from confmatrix.utils.config import get_section, load_settings, load_yaml, parse_average
from confmatrix.utils.logging import configure_logging, get_logger, log_classification_report


def test_load_yaml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "missing.yaml")


def test_load_yaml_rejects_non_mapping(tmp_path):
    p = tmp_path / "list.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml(p)


def test_get_section():
    cfg = {"evaluation": {"normalize": {"min": 1}}, "empty": None, "bad": 3}
    assert get_section(cfg, "evaluation", "normalize") == {"min": 1}
    assert get_section(cfg, "missing") == {}
    assert get_section(cfg, "empty") == {}
    with pytest.raises(ValueError):
        get_section(cfg, "bad")


def test_parse_average():
    assert parse_average("Macro") is Average.MACRO
    assert parse_average(Average.MICRO) is Average.MICRO
    with pytest.raises(ValueError):
        parse_average("harmonic")


def test_load_settings(tmp_path):
    p = tmp_path / "eval.yaml"
    p.write_text(
        "evaluation:\n"
        "  averages: [micro, weighted]\n"
        "  fraction_digits: 3\n"
        "  normalize:\n"
        "    min: -1\n"
        "    max: 1\n",
        encoding="utf-8",
    )
    settings = load_settings(p)
    assert settings.averages == (Average.MICRO, Average.WEIGHTED)
    assert settings.fraction_digits == 3
    assert (settings.normalize_min, settings.normalize_max) == (-1.0, 1.0)


def test_settings_defaults_from_empty_config():
    assert EvaluationSettings.from_config({}) == EvaluationSettings()


def test_settings_validate_range():
    with pytest.raises(InvalidRangeError):
        EvaluationSettings(normalize_min=2.0, normalize_max=1.0)
    with pytest.raises(InvalidRangeError):
        EvaluationSettings(fraction_digits=30)


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "run.log"
    logger = configure_logging(name="confmatrix.test", level=logging.DEBUG, log_file=log_file)
    logger.info("hello")
    for h in logger.handlers:
        h.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "| INFO | confmatrix.test | hello" in text
    assert logger.propagate is False

    # reconfiguring replaces handlers instead of stacking them
    configure_logging(name="confmatrix.test", log_file=log_file)
    assert len(logger.handlers) == 2
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


def test_get_logger():
    assert get_logger("confmatrix.x") is logging.getLogger("confmatrix.x")


def test_log_classification_report(happy_sad, caplog):
    logger = logging.getLogger("test.report")
    with caplog.at_level(logging.INFO, logger="test.report"):
        log_classification_report(happy_sad, logger)
    text = caplog.text
    assert "2 labels, 10 total" in text
    assert "weighted avg" in text
    assert "Happy" in text


def test_normalization_is_logged_at_debug(happy_sad, caplog):
    with caplog.at_level(logging.DEBUG, logger="confmatrix.matrix"):
        happy_sad.normalize()
        happy_sad.revert_normalization()
    messages = [r.getMessage() for r in caplog.records if r.name == "confmatrix.matrix"]
    assert any(m.startswith("Normalized [1, 4]") for m in messages)
    assert any(m.startswith("Reverted normalization") for m in messages)
