import pytest

from sigmoidnet.core.errors import ConfigurationError
from sigmoidnet.data import available_datasets, get_dataset, register_dataset
from sigmoidnet.data.registry import LabeledDataset


def test_builtin_datasets_are_registered():
    assert {"blobs", "colors", "csv", "xor"} <= set(available_datasets())


def test_colors_dataset_is_scaled():
    data = get_dataset("colors")
    assert len(data) == 9
    assert data.feature_count == 3
    assert data.labels[0] == "White"
    assert data.examples[0] == [1.0, 1.0, 1.0]
    assert data.prepare([255, 0, 51]) == [1.0, 0.0, 0.2]


def test_blobs_dataset_is_seeded():
    first = get_dataset("blobs", samples_per_class=3, seed=4)
    second = get_dataset("blobs", samples_per_class=3, seed=4)
    assert first.examples == second.examples
    assert first.labels == ["a"] * 3 + ["b"] * 3 + ["c"] * 3


def test_csv_loader(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("x1,x2,ignored,label\n0.1,0.2,9,cat\n0.8,0.9,9,dog\n")
    data = get_dataset("csv", csv_path=str(path), feature_cols=["x1", "x2"])
    assert data.examples == [[0.1, 0.2], [0.8, 0.9]]
    assert data.labels == ["cat", "dog"]
    assert data.provenance["feature_cols"] == ["x1", "x2"]

    with pytest.raises(ConfigurationError):
        get_dataset("csv", csv_path=str(path), label_col="species")
    with pytest.raises(ConfigurationError):
        get_dataset("csv", csv_path=str(path), feature_cols=["x3"])
    with pytest.raises(ConfigurationError):
        get_dataset("csv")


def test_registry_errors():
    with pytest.raises(ConfigurationError):
        get_dataset("does-not-exist")
    with pytest.raises(ConfigurationError):
        get_dataset("xor", bogus=1)

    @register_dataset("broken-fixture")
    def _broken():
        return LabeledDataset(name="broken-fixture", examples=[[0.0]], labels=[])

    with pytest.raises(ConfigurationError):
        get_dataset("broken-fixture")
