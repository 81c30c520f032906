"""Unit tests for the ConfusionMatrix accumulator.

Tests cover:
- Observation intake and matrix growth
- Row/column extraction and reset
- Accuracy, Precision, Sensitivity, F1
- Cohen's Kappa and Matthews correlation, including degenerate matrices
- summary() snapshot
"""

import numpy as np
import pytest

from onlinemetrics.metrics.base import MetricResult
from onlinemetrics.metrics.confusion import ConfusionMatrix


@pytest.fixture
def subject() -> ConfusionMatrix:
    """Return an empty confusion matrix."""
    return ConfusionMatrix()


def feed(cm: ConfusionMatrix, actual: list[int], predicted: list[int]) -> ConfusionMatrix:
    """Observe every (actual, predicted) pair."""
    for a, p in zip(actual, predicted, strict=True):
        cm.observe(a, p)
    return cm


# ==================== Observation Tests ====================


class TestObservation:
    """Tests for recording observations."""

    def test_weights(self, subject: ConfusionMatrix) -> None:
        """Test cell weights, rows and columns."""
        feed(subject, [0, 0, 1, 0, 0, 1, 1, 1], [1, 0, 1, 0, 0, 0, 0, 1])

        assert subject.order() == 2
        assert subject.total_weight() == 8.0

        np.testing.assert_array_equal(subject.row(0), [3.0, 1.0])
        np.testing.assert_array_equal(subject.row(1), [2.0, 2.0])
        assert subject.row(2) is None

        np.testing.assert_array_equal(subject.column(0), [3.0, 2.0])
        np.testing.assert_array_equal(subject.column(1), [1.0, 2.0])
        assert subject.column(2) is None

    def test_example_matrix(self, subject: ConfusionMatrix) -> None:
        """Test a three-class example matrix and its statistics."""
        feed(subject, [2, 0, 2, 2, 0, 1], [0, 0, 2, 2, 0, 2])

        assert subject.order() == 3
        np.testing.assert_array_equal(subject.row(0), [2.0, 0.0, 0.0])
        np.testing.assert_array_equal(subject.row(1), [0.0, 0.0, 1.0])
        np.testing.assert_array_equal(subject.row(2), [1.0, 0.0, 2.0])

        assert subject.accuracy() == pytest.approx(0.667, abs=0.001)
        assert subject.kappa() == pytest.approx(0.429, abs=0.001)
        assert subject.matthews() == pytest.approx(0.452, abs=0.001)

    def test_reset(self, subject: ConfusionMatrix) -> None:
        """Test reset returns to the empty state."""
        subject.observe_weight(0, 0, 40)
        subject.observe_weight(0, 1, 5)
        subject.observe_weight(1, 0, 5)
        subject.observe_weight(1, 1, 50)
        assert subject.order() == 2
        assert subject.total_weight() == 100.0

        subject.reset()
        assert subject.order() == 0
        assert subject.total_weight() == 0.0
        assert subject.row(0) is None

    def test_reset_matches_fresh_instance(self, subject: ConfusionMatrix) -> None:
        """Statistics after reset equal those of a new accumulator."""
        feed(subject, [0, 1, 2, 2], [1, 1, 0, 2])
        subject.reset()
        fresh = ConfusionMatrix()

        assert subject.accuracy() == fresh.accuracy() == 0.0
        assert subject.kappa() == fresh.kappa() == 0.0
        assert subject.matthews() == fresh.matthews() == 0.0
        assert subject.order() == fresh.order() == 0

    @pytest.mark.parametrize(
        ("actual", "predicted", "weight"),
        [
            (-1, 0, 1.0),
            (0, -1, 1.0),
            (-1, -1, 1.0),
            (0, 0, 0.0),
            (0, 0, -2.0),
            (5, 5, float("nan")),
            (1.5, 0, 1.0),
            (0, 2.5, 1.0),
        ],
    )
    def test_invalid_input_is_ignored(
        self,
        subject: ConfusionMatrix,
        actual: int,
        predicted: int,
        weight: float,
    ) -> None:
        """Invalid observations leave order and total weight unchanged."""
        subject.observe(1, 0)
        subject.observe_weight(actual, predicted, weight)
        assert subject.order() == 2
        assert subject.total_weight() == 1.0

    def test_weight_linearity(self, subject: ConfusionMatrix) -> None:
        """Two weighted observations equal one with the summed weight."""
        subject.observe_weight(1, 2, 1.5)
        subject.observe_weight(1, 2, 2.5)
        subject.observe_weight(0, 0, 3.0)

        other = ConfusionMatrix()
        other.observe_weight(1, 2, 4.0)
        other.observe_weight(0, 0, 3.0)

        np.testing.assert_array_equal(subject.matrix(), other.matrix())
        assert subject.kappa() == other.kappa()
        assert subject.matthews() == other.matthews()

    def test_growth_preserves_history(self, subject: ConfusionMatrix) -> None:
        """Observing a far category keeps earlier cells intact."""
        feed(subject, [0, 1, 2, 2, 1], [0, 2, 1, 2, 1])
        before = subject.matrix()

        k = 2
        subject.observe(k + 5, 0)

        assert subject.order() == k + 6
        after = subject.matrix()
        np.testing.assert_array_equal(after[: k + 1, : k + 1], before)
        assert after[k + 5, 0] == 1.0

    def test_returned_rows_are_copies(self, subject: ConfusionMatrix) -> None:
        """Mutating an accessor result leaves the matrix untouched."""
        subject.observe(0, 0)
        row = subject.row(0)
        matrix = subject.matrix()
        assert row is not None
        row[0] = 42.0
        matrix[0, 0] = 42.0
        assert subject.total_weight() == 1.0


class TestObserveBatch:
    """Tests for batch intake."""

    def test_batch_equals_sequential(self, multiclass_labels: tuple[list, list]) -> None:
        """Batch intake yields the same matrix as one-by-one intake."""
        actual, predicted = multiclass_labels
        sequential = feed(ConfusionMatrix(), actual, predicted)

        batched = ConfusionMatrix()
        batched.observe_batch(actual, predicted)

        np.testing.assert_array_equal(batched.matrix(), sequential.matrix())

    def test_batch_skips_invalid(self, subject: ConfusionMatrix) -> None:
        """Invalid elements are skipped individually."""
        subject.observe_batch([0, -1, 1, 1], [0, 0, 1, 0], [1.0, 1.0, 0.0, 2.0])
        assert subject.total_weight() == 3.0
        np.testing.assert_array_equal(subject.matrix(), [[1.0, 0.0], [2.0, 0.0]])

    def test_batch_length_mismatch(self, subject: ConfusionMatrix) -> None:
        """Mismatched lengths raise ValueError."""
        with pytest.raises(ValueError):
            subject.observe_batch([0, 1], [0])
        with pytest.raises(ValueError):
            subject.observe_batch([0, 1], [0, 1], [1.0])


# ==================== Rate Tests ====================


class TestRates:
    """Tests for accuracy, precision, sensitivity and F1."""

    def test_precision(self, subject: ConfusionMatrix, multiclass_labels: tuple) -> None:
        """Test precision per category."""
        feed(subject, *multiclass_labels)
        assert subject.precision(0) == pytest.approx(0.884, abs=0.001)
        assert subject.precision(1) == pytest.approx(1.000, abs=0.001)
        assert subject.precision(2) == pytest.approx(0.625, abs=0.001)
        assert subject.precision(3) == 0.0

    def test_sensitivity(self, subject: ConfusionMatrix, multiclass_labels: tuple) -> None:
        """Test sensitivity per category."""
        feed(subject, *multiclass_labels)
        assert subject.sensitivity(0) == pytest.approx(1.000, abs=0.001)
        assert subject.sensitivity(1) == pytest.approx(0.727, abs=0.001)
        assert subject.sensitivity(2) == pytest.approx(1.000, abs=0.001)
        assert subject.sensitivity(3) == 0.0

    def test_f1(self, subject: ConfusionMatrix, multiclass_labels: tuple) -> None:
        """Test F1 score per category."""
        feed(subject, *multiclass_labels)
        assert subject.f1(0) == pytest.approx(0.939, abs=0.001)
        assert subject.f1(1) == pytest.approx(0.842, abs=0.001)
        assert subject.f1(2) == pytest.approx(0.769, abs=0.001)
        assert subject.f1(3) == 0.0

    def test_f1_without_hits(self, subject: ConfusionMatrix) -> None:
        """A category that is predicted and present but never hit scores 0."""
        feed(subject, [0, 1], [1, 0])
        assert subject.f1(0) == 0.0

    def test_accuracy(self, subject: ConfusionMatrix, multiclass_labels: tuple) -> None:
        """Test overall accuracy."""
        feed(subject, *multiclass_labels)
        assert subject.accuracy() == pytest.approx(0.880, abs=0.001)

    def test_empty(self, subject: ConfusionMatrix) -> None:
        """Every rate is 0 on an empty matrix."""
        assert subject.accuracy() == 0.0
        assert subject.precision(0) == 0.0
        assert subject.sensitivity(0) == 0.0
        assert subject.f1(0) == 0.0


# ==================== Kappa Tests ====================


class TestKappa:
    """Tests for Cohen's Kappa."""

    def test_binary(self, subject: ConfusionMatrix, binary_labels: tuple) -> None:
        """Test the binary example."""
        feed(subject, *binary_labels)
        assert subject.kappa() == pytest.approx(0.348, abs=0.001)

    def test_multiclass(self, subject: ConfusionMatrix, multiclass_labels: tuple) -> None:
        """Test the multiclass example."""
        feed(subject, *multiclass_labels)
        assert subject.kappa() == pytest.approx(0.801, abs=0.001)

    def test_weighted(self, subject: ConfusionMatrix) -> None:
        """Test weighted observations."""
        subject.observe_weight(0, 0, 22)
        subject.observe_weight(0, 1, 7)
        subject.observe_weight(1, 0, 9)
        subject.observe_weight(1, 1, 13)
        assert subject.kappa() == pytest.approx(0.353, abs=0.001)

    def test_empty(self, subject: ConfusionMatrix) -> None:
        """Test empty and single-disagreement matrices."""
        assert subject.kappa() == 0.0

        subject.observe(0, 1)
        assert subject.kappa() == 0.0

    def test_full_agreement(self, subject: ConfusionMatrix) -> None:
        """Test full agreement."""
        subject.observe(0, 0)
        subject.observe(1, 1)
        assert subject.kappa() == 1.0

    def test_single_category_agreement(self, subject: ConfusionMatrix) -> None:
        """Chance agreement covering every observation yields 1.0."""
        subject.observe_weight(0, 0, 5.0)
        assert subject.kappa() == 1.0

    def test_single_category_fractional_weights(self, subject: ConfusionMatrix) -> None:
        """Rounding in fractional weights does not hide full chance agreement."""
        for weight in (0.1, 0.7, 1 / 3, 1.0333333333333332):
            subject.observe_weight(2, 2, weight)
        assert subject.kappa() == 1.0

    def test_no_agreement(self, subject: ConfusionMatrix) -> None:
        """Test balanced binary disagreement."""
        subject.observe(0, 1)
        subject.observe(1, 0)
        assert subject.kappa() == -1.0


# ==================== Matthews Tests ====================


class TestMatthews:
    """Tests for the Matthews correlation coefficient."""

    def test_binary(self, subject: ConfusionMatrix, binary_labels: tuple) -> None:
        """Test the binary example."""
        feed(subject, *binary_labels)
        assert subject.matthews() == pytest.approx(0.356, abs=0.001)

    def test_multiclass(self, subject: ConfusionMatrix, multiclass_labels: tuple) -> None:
        """Test the multiclass example."""
        feed(subject, *multiclass_labels)
        assert subject.matthews() == pytest.approx(0.816, abs=0.001)

    def test_full_agreement_binary(self, subject: ConfusionMatrix) -> None:
        """Test full agreement (binary)."""
        labels = [1, 0, 1, 1, 0, 1, 1, 1, 0, 1, 1, 1, 1, 1, 1, 1, 0, 1, 1, 1]
        feed(subject, labels, labels)
        assert subject.matthews() == 1.0
        assert subject.kappa() == 1.0
        assert subject.accuracy() == 1.0

    def test_full_agreement_multiclass(self, subject: ConfusionMatrix) -> None:
        """Test full agreement (multiclass)."""
        feed(subject, [0, 0, 1, 2], [0, 0, 1, 2])
        assert subject.matthews() == 1.0

    def test_no_agreement_binary(self, subject: ConfusionMatrix) -> None:
        """Test uncorrelated binary labels."""
        feed(
            subject,
            [1, 0, 1, 1, 0, 1, 1, 1, 0, 1, 1, 1, 1, 1, 1, 1, 0, 1, 1, 1],
            [1, 1, 1, 0, 0, 1, 1, 1, 1, 0, 1, 1, 1, 0, 1, 1, 1, 0, 1, 1],
        )
        assert subject.matthews() == 0.0

    def test_no_agreement_multiclass(self, subject: ConfusionMatrix) -> None:
        """Test systematic multiclass disagreement."""
        feed(subject, [0, 0, 1, 1, 2, 2], [2, 2, 0, 0, 1, 1])
        assert subject.matthews() == pytest.approx(-0.5, abs=0.0001)

    def test_no_correlation_multiclass(self, subject: ConfusionMatrix) -> None:
        """Test uncorrelated multiclass labels."""
        feed(subject, [0, 1, 2, 0, 1, 2, 0, 1, 2], [1, 1, 1, 2, 2, 2, 0, 0, 0])
        assert subject.matthews() == pytest.approx(0.0, abs=0.0001)

    def test_zero_variance(self, subject: ConfusionMatrix) -> None:
        """Constant predictions give an undefined correlation, reported as 0."""
        feed(subject, [0, 1, 2], [3, 3, 3])
        assert subject.matthews() == 0.0

    def test_zero_variance_fractional_weights(self, subject: ConfusionMatrix) -> None:
        """A single actual category with fractional weights reports 0."""
        subject.observe_weight(1, 0, 1.11)
        subject.observe_weight(1, 1, 1.3)
        subject.observe_weight(1, 2, 1 / 3)
        subject.observe_weight(1, 3, 1.0333333333333332)

        assert subject.matthews() == 0.0
        assert subject.summary().metadata["matthews"] == 0.0

    def test_single_row_fractional_fuzz(self) -> None:
        """Random single-row matrices always report 0."""
        rng = np.random.default_rng(7)
        for _ in range(2000):
            cm = ConfusionMatrix()
            row = int(rng.integers(0, 4))
            for predicted, weight in enumerate(rng.uniform(0.01, 3.0, size=4)):
                cm.observe_weight(row, predicted, float(weight))
            assert cm.matthews() == 0.0

    def test_empty(self, subject: ConfusionMatrix) -> None:
        """Test empty matrix."""
        assert subject.matthews() == 0.0


# ==================== Summary Tests ====================


class TestSummary:
    """Tests for summary()."""

    def test_summary_matches_methods(self, subject: ConfusionMatrix) -> None:
        """summary() agrees with the individual statistic methods."""
        feed(subject, [2, 0, 2, 2, 0, 1], [0, 0, 2, 2, 0, 2])

        result = subject.summary()

        assert isinstance(result, MetricResult)
        assert result.name == "confusion_matrix"
        assert result.value == pytest.approx(subject.accuracy())
        assert result.metadata["order"] == 3
        assert result.metadata["total_weight"] == 6.0
        assert result.metadata["kappa"] == pytest.approx(subject.kappa())
        assert result.metadata["matthews"] == pytest.approx(subject.matthews())
        assert result.metadata["matrix"] == [[2.0, 0.0, 0.0], [0.0, 0.0, 1.0], [1.0, 0.0, 2.0]]

        categories = result.metadata["categories"]
        assert len(categories) == 3
        for stats in categories:
            x = stats["category"]
            assert stats["precision"] == pytest.approx(subject.precision(x))
            assert stats["sensitivity"] == pytest.approx(subject.sensitivity(x))
            assert stats["f1"] == pytest.approx(subject.f1(x))

    def test_summary_empty(self, subject: ConfusionMatrix) -> None:
        """summary() of an empty matrix."""
        result = subject.summary()
        assert result.value == 0.0
        assert result.metadata["order"] == 0
        assert result.metadata["categories"] == []
        assert result.to_dict()["name"] == "confusion_matrix"
