# confmatrix/utils/logging.py
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from ..evaluation.matrix import ConfusionMatrix
    from .config import EvaluationSettings


PathLike = Union[str, Path]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str = "confmatrix") -> logging.Logger:
    """
    Get a named logger. Use configure_logging() once at program start.
    """
    return logging.getLogger(name)


def configure_logging(
    name: str = "confmatrix",
    level: int = logging.INFO,
    log_file: Optional[PathLike] = None,
    overwrite: bool = True,
) -> logging.Logger:
    """
    Configure logging to console and optionally a file.

    Args:
        name: logger name (library modules log under "confmatrix.*")
        level: logging.INFO / DEBUG / etc.
        log_file: optional path to write logs
        overwrite: if True, truncates the log file; else appends

    Returns:
        configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # prevent duplicate logs when root logger is configured elsewhere

    # Clear existing handlers (important for notebooks / repeated runs)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # Console handler
    ch = logging.StreamHandler(stream=sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    # File handler
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        mode = "w" if overwrite else "a"
        fh = logging.FileHandler(log_path, mode=mode, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


def log_classification_report(
    cm: "ConfusionMatrix",
    logger: Optional[logging.Logger] = None,
    settings: Optional["EvaluationSettings"] = None,
) -> None:
    """
    Log the grid and the per-label/averaged metric table at INFO.
    """
    from ..evaluation.confusion import format_confusion_matrix
    from ..evaluation.metrics import classification_report, report_to_frame

    logger = logger or get_logger()
    report = classification_report(cm, settings)

    logger.info("=" * 80)
    logger.info(f"Confusion matrix ({len(cm.labels)} labels, {cm.total_cell_sum()} total)")
    for line in format_confusion_matrix(cm.labels, cm.matrix).splitlines():
        logger.info(line)
    logger.info("-" * 80)
    for line in report_to_frame(report).to_string().splitlines():
        logger.info(line)
    logger.info("=" * 80)
