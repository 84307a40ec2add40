import pytest

from core.layer_config import ICEBERG_LAYERS, LAYERS_BY_ID, SEVERITY_LABELS, waterline_layer


def test_exactly_one_layer_above_waterline():
    assert sum(1 for layer in ICEBERG_LAYERS if layer.above_waterline) == 1
    assert waterline_layer().layer_id == "replacement"


def test_layer_ids_are_unique():
    assert len(LAYERS_BY_ID) == len(ICEBERG_LAYERS) == 7


def test_default_multipliers_sum_to_three():
    assert sum(layer.default_multiplier for layer in ICEBERG_LAYERS) == pytest.approx(3.0)
    assert all(layer.default_multiplier > 0 for layer in ICEBERG_LAYERS)


def test_layers_are_immutable():
    with pytest.raises(Exception):
        ICEBERG_LAYERS[0].default_multiplier = 1.0  # type: ignore[misc]


def test_severity_labels():
    assert SEVERITY_LABELS[3] == "Moderate"
    assert sorted(SEVERITY_LABELS) == [1, 2, 3, 4, 5]
