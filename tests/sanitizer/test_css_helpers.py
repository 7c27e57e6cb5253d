# tests/sanitizer/test_css_helpers.py
import pytest

from amp_sanitizer.dom.css import CssLength, format_numeral, parse_style_string, reassemble_style_string


def test_parse_style_string():
    """Lege paren en paren zonder ':' worden genegeerd; property-namen worden lowercase."""
    styles = parse_style_string("color: red; WIDTH:10px;;bogus; background: url(data:x)")
    assert styles == {"color": "red", "width": "10px", "background": "url(data:x)"}
    assert list(styles) == ["color", "width", "background"]


def test_reassemble_style_string():
    assert reassemble_style_string({"color": "red", "margin": "0 auto"}) == "color:red;margin:0 auto"
    assert reassemble_style_string({}) == ""


@pytest.mark.parametrize("value, attribute", [
    ("50px", "50"),
    ("50", "50"),
    ("2.5em", "2.5em"),
    ("10.0rem", "10rem"),
    ("100vh", "100vh"),
    ("3vmin", "3vmin"),
])
def test_valid_lengths(value, attribute):
    length = CssLength(value).validate()
    assert length.is_valid
    assert length.to_attribute_value() == attribute


@pytest.mark.parametrize("value", ["100%", "-5px", "1.px", "10pt", "", "calc(1px + 2px)"])
def test_invalid_lengths(value):
    length = CssLength(value).validate()
    assert not length.is_valid
    with pytest.raises(ValueError):
        length.to_attribute_value()


def test_auto_and_fluid_depend_on_flags():
    assert not CssLength("auto").validate().is_valid
    assert CssLength("auto").validate(allow_auto=True).is_valid
    assert CssLength("auto").validate().is_auto

    assert not CssLength("fluid").validate().is_valid
    assert CssLength("fluid").validate(allow_fluid=True).is_fluid


def test_unset_length():
    length = CssLength(None).validate()
    assert not length.is_set
    assert not length.is_valid


def test_format_numeral():
    assert format_numeral("50.0") == "50"
    assert format_numeral("1.25") == "1.25"
    assert format_numeral("007.50") == "7.5"
    assert format_numeral("0.0") == "0"


def test_extreme_lengths_keep_their_digits():
    """Heel kleine of heel grote getallen mogen niet via float afgerond of wetenschappelijk genoteerd worden."""
    assert CssLength("0.00001px").validate().to_attribute_value() == "0.00001"
    assert CssLength("12345678901234567890px").validate().to_attribute_value() == "12345678901234567890"
    assert CssLength("0.000001em").validate().to_attribute_value() == "0.000001em"
