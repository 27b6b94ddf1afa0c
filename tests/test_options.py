import pytest

from options import (
    LENGTH_OPTIONS, RATE_OPTIONS, SIZE_OPTIONS,
    ParameterOption, ParameterSelector, RunParameters, default_parameters,
)


def test_defaults():
    assert LENGTH_OPTIONS.default.label == "100 km"
    assert RATE_OPTIONS.default.label == "1 Mbps"
    assert SIZE_OPTIONS.default.label == "500 Bytes"
    assert default_parameters() == RunParameters(length_m=1E5, rate_bps=1E6, size_bits=4E3)


def test_option_values():
    assert [o.value for o in LENGTH_OPTIONS.options] == [1E4, 1E5, 5E5, 1E6]
    assert [o.value for o in RATE_OPTIONS.options] == [5.12E5, 1E6, 1E7, 1E8]
    assert [o.value for o in SIZE_OPTIONS.options] == [8E2, 4E3, 8E3]


def test_value_for_and_index_of():
    assert LENGTH_OPTIONS.value_for("1000 km") == 1E6
    assert RATE_OPTIONS.index_of("10 Mbps") == 2
    with pytest.raises(KeyError):
        SIZE_OPTIONS.value_for("2 kBytes")


def test_from_labels():
    params = RunParameters.from_labels("10 km", "100 Mbps", "100 Bytes")
    assert params.to_dict() == {"length_m": 1E4, "rate_bps": 1E8, "size_bits": 8E2}


def test_selector_validation():
    with pytest.raises(ValueError):
        ParameterSelector(name="empty", options=())
    with pytest.raises(ValueError):
        ParameterSelector(name="bad", options=(ParameterOption("a", 1.0),), default_index=3)
