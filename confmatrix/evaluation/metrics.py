# confmatrix/evaluation/metrics.py
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional, Union

import numpy as np
import pandas as pd

from .confusion import ConfusionCounts, Number

if TYPE_CHECKING:
    from ..utils.config import EvaluationSettings
    from .matrix import ConfusionMatrix


class Average(Enum):
    """How per-label values are combined into one matrix-wide value."""
    MICRO = "micro"
    MACRO = "macro"
    WEIGHTED = "weighted"


def safe_ratio(numerator: Number, denominator: Number) -> float:
    """numerator / denominator, with 0.0 for a zero denominator or a NaN result."""
    if not denominator:
        return 0.0
    result = float(numerator) / float(denominator)
    if math.isnan(result):
        return 0.0
    return result


def accuracy_from_counts(c: ConfusionCounts) -> float:
    return safe_ratio(c.true_positive + c.true_negative, c.total)


def misclassification_rate_from_counts(c: ConfusionCounts) -> float:
    return safe_ratio(c.false_positive + c.false_negative, c.total)


def precision_from_counts(c: ConfusionCounts) -> float:
    return safe_ratio(c.true_positive, c.true_positive + c.false_positive)


def recall_from_counts(c: ConfusionCounts) -> float:
    return safe_ratio(c.true_positive, c.true_positive + c.false_negative)


def specificity_from_counts(c: ConfusionCounts) -> float:
    return safe_ratio(c.true_negative, c.true_negative + c.false_positive)


def f1_from_counts(c: ConfusionCounts) -> float:
    """Harmonic mean of precision and recall (both derived from the same counts)."""
    precision = precision_from_counts(c)
    recall = recall_from_counts(c)
    return safe_ratio(2.0 * precision * recall, precision + recall)


@dataclass(frozen=True)
class Metric:
    """
    One metric family evaluated against a ConfusionMatrix.

    Averaging:
        micro    -> formula applied once to the pooled counts of all labels
        macro    -> unweighted mean of the per-label values
        weighted -> per-label values weighted by each label's prediction total

    Every entry point revalidates the matrix, so a matrix mutated into an
    invalid state between calls raises InvalidMatrixError.
    """
    name: str
    formula: Callable[[ConfusionCounts], float]

    def label(self, cm: "ConfusionMatrix", label: str) -> float:
        cm.validate()
        return self.formula(cm.get_confusion_matrix_classes(label))

    def micro(self, cm: "ConfusionMatrix") -> float:
        cm.validate()
        return self.formula(cm.get_sum_confusion_matrix_classes())

    def macro(self, cm: "ConfusionMatrix") -> float:
        cm.validate()
        values = [self.formula(c) for c in cm.get_all_matrix_classes().values()]
        return safe_ratio(sum(values), len(values))

    def weighted(self, cm: "ConfusionMatrix") -> float:
        cm.validate()
        values = np.asarray([self.formula(c) for c in cm.get_all_matrix_classes().values()], dtype=float)
        weights = np.asarray(cm.label_prediction_sum(), dtype=float)
        return safe_ratio(float(np.dot(values, weights)), float(weights.sum()))

    def average(self, cm: "ConfusionMatrix", average: Average = Average.WEIGHTED) -> float:
        if average is Average.MICRO:
            return self.micro(cm)
        if average is Average.MACRO:
            return self.macro(cm)
        if average is Average.WEIGHTED:
            return self.weighted(cm)
        raise ValueError(f"average must be an Average member, got {average!r}.")

    def __call__(
        self,
        cm: "ConfusionMatrix",
        label: Optional[str] = None,
        average: Optional[Average] = None,
    ) -> float:
        """A non-empty `label` wins over `average`; average defaults to WEIGHTED."""
        cm.validate()
        if label:
            return self.label(cm, label)
        return self.average(cm, Average.WEIGHTED if average is None else average)


ACCURACY = Metric("accuracy", accuracy_from_counts)
MISCLASSIFICATION_RATE = Metric("misclassification_rate", misclassification_rate_from_counts)
PRECISION = Metric("precision", precision_from_counts)
RECALL = Metric("recall", recall_from_counts)
SPECIFICITY = Metric("specificity", specificity_from_counts)
F1_SCORE = Metric("f1_score", f1_from_counts)

METRICS: Dict[str, Metric] = {
    m.name: m
    for m in (ACCURACY, MISCLASSIFICATION_RATE, PRECISION, RECALL, SPECIFICITY, F1_SCORE)
}


def get_metric(name: Union[str, Metric]) -> Metric:
    if isinstance(name, Metric):
        return name
    try:
        return METRICS[name]
    except KeyError:
        raise ValueError(f"Unknown metric {name!r}; expected one of {sorted(METRICS)}.") from None


def classification_report(
    cm: "ConfusionMatrix",
    settings: Optional["EvaluationSettings"] = None,
) -> Dict[str, Dict[str, float]]:
    """
    Compute every metric per label and for the configured averages.

    Returns:
        dict with keys per label and aggregate keys:
            - "<label>"      : metric name -> value, plus "support"
            - "micro avg"    : pooled-count metrics
            - "macro avg"    : mean of label metrics
            - "weighted avg" : prediction-weighted mean of label metrics
        "support" is the label's prediction total (grand total for averages).
    """
    from ..utils.config import EvaluationSettings

    settings = settings or EvaluationSettings()
    cm.validate()

    def _r(value: float) -> float:
        if settings.fraction_digits is None:
            return float(value)
        return round(float(value), settings.fraction_digits)

    report: Dict[str, Dict[str, float]] = {}
    supports = cm.label_prediction_sum()
    total_support = float(sum(supports))

    # Per-label
    for label, support in zip(cm.labels, supports):
        row = {name: _r(m.label(cm, label)) for name, m in METRICS.items()}
        row["support"] = float(support)
        report[label] = row

    # Averages
    for average in settings.averages:
        row = {name: _r(m.average(cm, average)) for name, m in METRICS.items()}
        row["support"] = total_support
        report[f"{average.value} avg"] = row

    return report


def report_to_frame(report: Dict[str, Dict[str, float]]) -> pd.DataFrame:
    """Tabulate a classification report: one row per label/average."""
    columns = list(METRICS) + ["support"]
    df = pd.DataFrame.from_dict(report, orient="index")
    return df.reindex(columns=columns)
