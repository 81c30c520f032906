"""Visualization utilities for confusion matrices.

Plot data is returned in a library-agnostic structure so that any plotting
library can be used. matplotlib is only imported when a figure is
actually rendered.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from onlinemetrics.metrics.confusion import ConfusionMatrix

if TYPE_CHECKING:
    from matplotlib.figure import Figure


@dataclass
class PlotData:
    """Container for heatmap data.

    Attributes:
        cells: Row-major grid of cell values.
        labels: Category labels, shared by both axes.
        xlabel: X-axis label.
        ylabel: Y-axis label.
        title: Plot title.
        metadata: Additional plot-specific data.
    """

    cells: list[list[float]] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    xlabel: str = ""
    ylabel: str = ""
    title: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


class ConfusionMatrixHeatmap:
    """Heatmap of actual (rows) vs predicted (columns) category weights.

    Example:
        >>> heatmap = ConfusionMatrixHeatmap(normalize=True)
        >>> data = heatmap.get_plot_data(cm)
        >>> fig = heatmap.plot(cm)
        >>> fig.savefig("confusion.png")
    """

    def __init__(
        self,
        labels: list[str] | None = None,
        normalize: bool = False,
        show_values: bool = True,
        cmap: str = "Blues",
    ) -> None:
        """Initialize heatmap.

        Args:
            labels: Category names; indices are used when not given.
            normalize: Scale each row to sum to 1 (rows with no weight stay 0).
            show_values: Whether to annotate cells with their values.
            cmap: Matplotlib colormap name.
        """
        self.labels = labels
        self.normalize = normalize
        self.show_values = show_values
        self.cmap = cmap

    def _grid(self, source: ConfusionMatrix | NDArray[np.float64]) -> NDArray[np.float64]:
        data = source.matrix() if isinstance(source, ConfusionMatrix) else np.asarray(source)
        data = data.astype(np.float64)
        if data.ndim != 2 or data.shape[0] != data.shape[1]:
            raise ValueError(f"Expected a square matrix, got shape {data.shape}")

        if self.normalize and data.size:
            row_sums = data.sum(axis=1, keepdims=True)
            data = np.divide(data, row_sums, out=np.zeros_like(data), where=row_sums != 0)
        return data

    def _labels(self, n: int) -> list[str]:
        if self.labels is None:
            return [str(i) for i in range(n)]
        labels = list(self.labels[:n])
        labels.extend(str(i) for i in range(len(labels), n))
        return labels

    def get_plot_data(self, source: ConfusionMatrix | NDArray[np.float64]) -> PlotData:
        """Get plot data from a confusion matrix or a square array.

        Args:
            source: ConfusionMatrix or square 2-D array.

        Returns:
            PlotData for plotting.

        Raises:
            ValueError: If an array source is not square.
        """
        data = self._grid(source)
        return PlotData(
            cells=data.tolist(),
            labels=self._labels(data.shape[0]),
            xlabel="Predicted",
            ylabel="Actual",
            title="Confusion Matrix",
            metadata={
                "order": data.shape[0],
                "normalized": self.normalize,
                "max_value": float(data.max()) if data.size else 0.0,
            },
        )

    def plot(
        self,
        source: ConfusionMatrix | NDArray[np.float64],
        ax: Any = None,
        figsize: tuple[int, int] = (7, 6),
    ) -> "Figure":
        """Plot the heatmap using matplotlib.

        Args:
            source: ConfusionMatrix or square 2-D array.
            ax: Matplotlib axes (creates new figure if None).
            figsize: Figure size if creating new figure.

        Returns:
            Matplotlib Figure object.

        Raises:
            ImportError: If matplotlib is not installed.
        """
        try:
            import matplotlib.pyplot as plt
        except ImportError as e:
            raise ImportError(
                "matplotlib is required for plotting. Install with: pip install matplotlib"
            ) from e

        data = self._grid(source)

        if ax is None:
            fig, ax = plt.subplots(figsize=figsize)
        else:
            fig = ax.get_figure()

        if data.size == 0:
            ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)
            return fig

        image = ax.imshow(data, interpolation="nearest", cmap=self.cmap)
        fig.colorbar(image, ax=ax)

        labels = self._labels(data.shape[0])
        ticks = np.arange(data.shape[0])
        ax.set_xticks(ticks)
        ax.set_yticks(ticks)
        ax.set_xticklabels(labels)
        ax.set_yticklabels(labels)

        if self.show_values:
            threshold = data.max() / 2.0
            fmt = "{:.2f}" if self.normalize else "{:g}"
            for i in range(data.shape[0]):
                for j in range(data.shape[1]):
                    ax.text(
                        j,
                        i,
                        fmt.format(data[i, j]),
                        ha="center",
                        va="center",
                        fontsize=9,
                        color="white" if data[i, j] > threshold else "black",
                    )

        ax.set_xlabel("Predicted", fontsize=12)
        ax.set_ylabel("Actual", fontsize=12)
        ax.set_title("Confusion Matrix", fontsize=14)

        plt.tight_layout()
        return fig
