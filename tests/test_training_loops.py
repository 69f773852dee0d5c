import numpy as np
import pytest

from sigmoidnet.core.errors import ConfigurationError
from sigmoidnet.core.initializers import init_network, make_rng
from sigmoidnet.training import Trainer, TrainerConfig, TrainingStatus

XOR_X = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
XOR_Y = np.array([0, 1, 1, 0])


def _non_increasing(values):
    return all(b <= a for a, b in zip(values, values[1:]))


def test_same_seed_gives_identical_training():
    config = TrainerConfig(hidden_layer_size=3, regularization=0.05, max_iterations=300)
    first = Trainer(config).run(XOR_X, XOR_Y, 2, rng=3)
    second = Trainer(config).run(XOR_X, XOR_Y, 2, rng=3)

    assert first.cost_history == second.cost_history
    assert first.iterations == second.iterations
    for a, b in zip(first.network.arrays(), second.network.arrays()):
        assert np.array_equal(a, b)


def test_rejected_candidates_are_rolled_back():
    config = TrainerConfig(
        hidden_layer_size=2,
        regularization=1.0,
        learning_rate=1e6,
        max_iterations=200,
    )
    result = Trainer(config).run(XOR_X, XOR_Y, 2, rng=0)

    assert result.rejected_steps >= 1
    assert result.accepted_steps >= 1
    assert result.iterations == result.accepted_steps + result.rejected_steps
    assert len(result.cost_history) == result.accepted_steps + 1
    assert _non_increasing(result.cost_history)
    assert result.learning_rate < 1e6


def test_budget_exhaustion_reports_exhausted():
    config = TrainerConfig(
        learning_rate=0.1,
        max_iterations=3,
        convergence_threshold=0.0,
        cost_floor=0.0,
    )
    result = Trainer(config).run(XOR_X, XOR_Y, 2, rng=0)
    assert result.status is TrainingStatus.EXHAUSTED
    assert result.iterations == 3


def test_learning_rate_collapse_returns_last_accepted_network():
    config = TrainerConfig(
        hidden_layer_size=2,
        regularization=1.0,
        learning_rate=1e6,
        min_learning_rate=1e5,
        max_iterations=100,
    )
    network = init_network(2, 2, 2, 1, make_rng(0))
    result = Trainer(config).fit(network, XOR_X, XOR_Y)

    assert result.status is TrainingStatus.DIVERGED_RECOVERED
    assert result.accepted_steps == 0
    assert result.rejected_steps == 4
    assert result.network is network
    assert len(result.cost_history) == 1


def test_cost_floor_stops_training():
    config = TrainerConfig(learning_rate=0.1, cost_floor=10.0)
    result = Trainer(config).run(XOR_X, XOR_Y, 2, rng=0)
    assert result.status is TrainingStatus.CONVERGED
    assert result.iterations == 1
    assert result.accepted_steps == 1
    assert result.final_cost < result.cost_history[0]


def test_small_improvement_stops_training():
    config = TrainerConfig(learning_rate=0.1, convergence_threshold=1.0, cost_floor=0.0)
    result = Trainer(config).run(XOR_X, XOR_Y, 2, rng=0)
    assert result.status is TrainingStatus.CONVERGED
    assert result.accepted_steps == 1


def test_fit_leaves_the_starting_network_untouched():
    network = init_network(2, 3, 2, 1, make_rng(1))
    snapshot = [a.copy() for a in network.arrays()]
    Trainer(TrainerConfig(max_iterations=25)).fit(network, XOR_X, XOR_Y)
    for before, after in zip(snapshot, network.arrays()):
        assert np.array_equal(before, after)


def test_progress_callbacks_follow_log_every():
    records = []

    class Recorder:
        def __init__(self):
            self.steps = []

        def on_step(self, step, metrics):
            self.steps.append(step)

    recorder = Recorder()
    config = TrainerConfig(
        learning_rate=0.1,
        max_iterations=20,
        convergence_threshold=0.0,
        cost_floor=0.0,
        log_every=5,
    )
    Trainer(config, callbacks=[lambda step, m: records.append((step, dict(m))), recorder]).run(
        XOR_X, XOR_Y, 2, rng=0
    )

    assert [step for step, _ in records] == [5, 10, 15, 20, 20]
    assert recorder.steps == [5, 10, 15, 20, 20]
    assert records[-1][1]["final"] == 1.0
    for _, metrics in records:
        assert {"cost", "learning_rate", "accepted_steps", "rejected_steps"} <= set(metrics)


def test_progress_reporting_can_be_disabled():
    records = []
    config = TrainerConfig(max_iterations=20, log_every=0)
    Trainer(config, callbacks=[lambda step, m: records.append(step)]).run(XOR_X, XOR_Y, 2)
    assert records == []


def test_trainer_config_from_mapping():
    config = TrainerConfig.from_mapping({"max_iterations": "50", "regularization": "0.5"})
    assert config.max_iterations == 50
    assert isinstance(config.max_iterations, int)
    assert config.regularization == 0.5
    assert config.to_dict()["hidden_layer_size"] == 4

    with pytest.raises(ConfigurationError):
        TrainerConfig.from_mapping({"epochs": 3})
    with pytest.raises(ConfigurationError):
        TrainerConfig.from_mapping({"learning_rate": "fast"})


@pytest.mark.parametrize(
    "overrides",
    [
        {"hidden_layer_size": 0},
        {"hidden_layer_count": 0},
        {"regularization": -0.1},
        {"learning_rate": 0.0},
        {"deceleration": 1.5},
        {"acceleration": 0.9},
        {"max_iterations": 0},
        {"convergence_patience": 0},
        {"regularization": float("nan")},
    ],
)
def test_trainer_config_rejects_invalid_values(overrides):
    with pytest.raises(ConfigurationError):
        TrainerConfig(**overrides).validate()


def test_trainer_rejects_inconsistent_batches():
    trainer = Trainer(TrainerConfig(max_iterations=5))
    with pytest.raises(ConfigurationError):
        trainer.run(XOR_X, XOR_Y[:3], 2)
    with pytest.raises(ConfigurationError):
        trainer.run(XOR_X, np.array([0, 1, 2, 0]), 2)
    with pytest.raises(ConfigurationError):
        trainer.run(np.empty((0, 2)), np.empty(0), 2)
    network = init_network(3, 2, 2, 1, make_rng(0))
    with pytest.raises(ConfigurationError):
        trainer.fit(network, XOR_X, XOR_Y)


def test_learning_rate_grows_after_patience_accepted_steps():
    config = TrainerConfig(
        learning_rate=1e-3,
        acceleration=2.0,
        patience=2,
        max_iterations=9,
        convergence_threshold=0.0,
        cost_floor=0.0,
    )
    result = Trainer(config).run(XOR_X, XOR_Y, 2, rng=0)

    assert result.rejected_steps == 0
    assert result.accepted_steps == 9
    # Streaks of three accepted steps double the rate at steps 3, 6 and 9.
    assert result.learning_rate == pytest.approx(1e-3 * 2**3)


def test_convergence_patience_requires_consecutive_flat_steps():
    config = TrainerConfig(
        learning_rate=0.1,
        convergence_threshold=1.0,
        convergence_patience=3,
        cost_floor=0.0,
    )
    result = Trainer(config).run(XOR_X, XOR_Y, 2, rng=0)
    assert result.status is TrainingStatus.CONVERGED
    assert result.accepted_steps == 3


def test_flat_start_is_not_reported_as_convergence():
    config = TrainerConfig(hidden_layer_size=2, regularization=0.0, max_iterations=50)
    result = Trainer(config).run(XOR_X, XOR_Y, 2, rng=1)
    assert result.status is TrainingStatus.EXHAUSTED
    assert result.iterations == 50
