import pytest

from gif2spritesheet.core import LayoutConfig, LayoutMode
from gif2spritesheet.core.errors import ValidationError
from gif2spritesheet.utils import file_tools, validators


def test_parse_layout_mode_accepts_any_case():
    assert validators.parse_layout_mode(" Grid ") is LayoutMode.GRID
    assert validators.parse_layout_mode(None) is LayoutMode.HORIZONTAL


def test_parse_layout_mode_rejects_unknown():
    with pytest.raises(ValidationError):
        validators.parse_layout_mode("diagonal")


@pytest.mark.parametrize("value, expected", [(None, None), ("", None), (0, 1), (-3, 1), ("abc", 1), ("4", 4)])
def test_clamp_columns(value, expected):
    assert validators.clamp_columns(value) == expected


def test_parse_padding_bounds():
    assert validators.parse_padding("12") == 12
    assert validators.parse_padding(None) == 0
    with pytest.raises(ValidationError):
        validators.parse_padding(-1)
    with pytest.raises(ValidationError):
        validators.parse_padding(validators.MAX_PADDING + 1)
    with pytest.raises(ValidationError):
        validators.parse_padding("wide")


def test_normalize_config():
    assert validators.normalize_config("vertical", 3, 0) == LayoutConfig(LayoutMode.VERTICAL, 3, 1)


@pytest.mark.parametrize(
    "filename, stem",
    [("walk.gif", "walk"), ("my.hero.gif", "my.hero"), ("noext", "spritesheet"), (None, "spritesheet")],
)
def test_default_stem(filename, stem):
    assert file_tools.default_stem(filename) == stem
