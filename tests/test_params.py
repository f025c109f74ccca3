"""Tests for RenderParameters domains, clamping and validation."""
import pytest

from pixelshade.errors import ParameterError
from pixelshade.params import DEFAULT_PARAMETERS, RenderParameters


def test_defaults():
    assert DEFAULT_PARAMETERS == RenderParameters(10, 1.0, 1.0, 0)
    DEFAULT_PARAMETERS.validate()


def test_value_semantics():
    a = RenderParameters(pixel_size=4, brightness=1.5)
    b = RenderParameters(pixel_size=4, brightness=1.5)
    assert a == b
    assert hash(a) == hash(b)
    assert a != a.replace(contrast=2.0)


def test_clamped_limits_every_field_independently():
    p = RenderParameters.clamped(pixel_size=99, brightness=0.1, contrast=5, shadow_radius=-3)
    assert p == RenderParameters(50, 0.5, 2.0, 0)


def test_clamp_rounds_integer_fields():
    p = RenderParameters(pixel_size=7.6, shadow_radius=2.4).clamp()
    assert p.pixel_size == 8
    assert p.shadow_radius == 2
    assert isinstance(p.pixel_size, int)


@pytest.mark.parametrize(
    "field,value",
    [("pixel_size", 51), ("pixel_size", -1), ("brightness", 2.5), ("contrast", 0.4), ("shadow_radius", 31)],
)
def test_validate_rejects_out_of_domain(field, value):
    with pytest.raises(ParameterError, match=field):
        RenderParameters().replace(**{field: value}).validate()


def test_parameter_error_is_value_error():
    with pytest.raises(ValueError):
        RenderParameters(pixel_size=100).validate()


def test_from_mapping_accepts_aliases_and_defaults():
    p = RenderParameters.from_mapping({"pixelSize": "6", "shadow": 3, "contrast": 1.2})
    assert p == RenderParameters(pixel_size=6, brightness=1.0, contrast=1.2, shadow_radius=3)


def test_from_mapping_rejects_unknown_and_bad_values():
    with pytest.raises(ParameterError):
        RenderParameters.from_mapping({"palette": "retro"})
    with pytest.raises(ParameterError):
        RenderParameters.from_mapping({"brightness": "very"})
    with pytest.raises(ParameterError):
        RenderParameters.from_mapping({"pixel_size": 80})


def test_as_dict_round_trip():
    p = RenderParameters(3, 0.8, 1.7, 12)
    assert RenderParameters.from_mapping(p.as_dict()) == p


def test_is_identity():
    assert RenderParameters(pixel_size=0).is_identity
    assert not RenderParameters(pixel_size=0, shadow_radius=1).is_identity
    assert not DEFAULT_PARAMETERS.is_identity


@pytest.mark.parametrize("field", ["pixel_size", "brightness", "contrast", "shadow_radius"])
def test_clamp_replaces_nan_with_default(field):
    p = RenderParameters().replace(**{field: float("nan")}).clamp()
    assert getattr(p, field) == getattr(DEFAULT_PARAMETERS, field)
    p.validate()


@pytest.mark.parametrize(
    "field,lo,hi",
    [("pixel_size", 0, 50), ("brightness", 0.5, 2.0), ("contrast", 0.5, 2.0), ("shadow_radius", 0, 30)],
)
def test_clamp_pins_infinities_to_bounds(field, lo, hi):
    assert getattr(RenderParameters().replace(**{field: float("inf")}).clamp(), field) == hi
    assert getattr(RenderParameters().replace(**{field: float("-inf")}).clamp(), field) == lo


def test_validate_rejects_nan():
    with pytest.raises(ParameterError):
        RenderParameters(brightness=float("nan")).validate()
