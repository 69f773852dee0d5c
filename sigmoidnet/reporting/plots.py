"""Training-curve plot: accepted cost and the adaptive learning rate."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Tuple


class PlotAdapter:
    """Trainer callback that records progress and writes ``cost.png`` on close.

    The cost is drawn on a log axis; the learning rate shares the x axis on a
    second log axis so accelerations and rejections show up as steps.
    """

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: List[Tuple[int, float, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    @property
    def plot_path(self) -> Path:
        return self.run_dir / "cost.png"

    def on_step(self, step: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots or "cost" not in metrics:
            return
        rate = float(metrics.get("learning_rate", float("nan")))
        self._history.append((int(step), float(metrics["cost"]), rate))

    def close(self) -> None:
        if not self.enable_plots or not self._history:
            return
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        steps, costs, rates = zip(*self._history)
        fig, cost_ax = plt.subplots()
        try:
            cost_ax.plot(steps, costs, color="tab:blue", label="cost")
            cost_ax.set_xlabel("Iteration")
            cost_ax.set_ylabel("Cost")
            cost_ax.set_yscale("log")
            rate_ax = cost_ax.twinx()
            rate_ax.step(steps, rates, where="post", color="tab:orange", label="learning rate")
            rate_ax.set_ylabel("Learning rate")
            rate_ax.set_yscale("log")
            cost_ax.set_title(f"Final cost {costs[-1]:.4g} after {steps[-1]} iterations")
            fig.savefig(self.plot_path)
        finally:
            plt.close(fig)

    __call__ = on_step


__all__ = ["PlotAdapter"]
