import pytest

from zjctl.selector import (
    CommandSelector,
    FocusedSelector,
    IdSelector,
    InvalidFormatError,
    InvalidPaneIdError,
    InvalidPaneTypeError,
    InvalidRegexError,
    PaneType,
    RegexPattern,
    SelectorError,
    SubstringPattern,
    TabIndexSelector,
    TitleSelector,
    parse_selector,
    parse_string_pattern,
    pattern_from_dict,
    pattern_to_dict,
    selector_from_dict,
    selector_to_dict,
)


def test_parse_focused():
    assert parse_selector("focused") == FocusedSelector()


def test_parse_focused_trims_whitespace():
    assert parse_selector("  focused\n") == FocusedSelector()


@pytest.mark.parametrize(
    "text, pane_type, pane_id",
    [
        ("id:terminal:42", PaneType.TERMINAL, 42),
        ("terminal:42", PaneType.TERMINAL, 42),
        ("id:terminal:0007", PaneType.TERMINAL, 7),
        ("id:plugin:7", PaneType.PLUGIN, 7),
        ("plugin:7", PaneType.PLUGIN, 7),
        ("id:TERMINAL:3", PaneType.TERMINAL, 3),
    ],
)
def test_parse_id(text, pane_type, pane_id):
    assert parse_selector(text) == IdSelector(pane_type, pane_id)


def test_parse_id_invalid_format():
    with pytest.raises(InvalidFormatError):
        parse_selector("id:terminal")


def test_parse_id_invalid_numeric():
    with pytest.raises(InvalidPaneIdError):
        parse_selector("id:terminal:4a")


@pytest.mark.parametrize("text", ["terminal:+5", "terminal:", "terminal:4294967296"])
def test_parse_shorthand_invalid_id(text):
    with pytest.raises(InvalidPaneIdError):
        parse_selector(text)


def test_parse_id_invalid_pane_type():
    with pytest.raises(InvalidPaneTypeError):
        parse_selector("id:window:3")


def test_parse_title_substring():
    sel = parse_selector("title:vim")
    assert sel == TitleSelector(SubstringPattern("vim"))


def test_parse_title_regex():
    sel = parse_selector("title:/^vim.*$/")
    assert sel == TitleSelector(RegexPattern("^vim.*$"))


def test_parse_title_invalid_regex():
    with pytest.raises(InvalidRegexError):
        parse_selector("title:/(/")


def test_parse_cmd_substring():
    assert parse_selector("cmd:cargo") == CommandSelector(SubstringPattern("cargo"))


def test_parse_tab_index():
    assert parse_selector("tab:2:index:0") == TabIndexSelector(2, 0)


@pytest.mark.parametrize("text", ["tab:2", "tab:2:idx:0", "tab:x:index:0", "tab:1:index:y"])
def test_parse_tab_invalid(text):
    with pytest.raises(InvalidFormatError):
        parse_selector(text)


def test_parse_unknown_format():
    with pytest.raises(InvalidFormatError) as excinfo:
        parse_selector("bogus")
    assert str(excinfo.value) == "invalid selector format: unknown selector format: bogus"
    assert isinstance(excinfo.value, SelectorError)


def test_string_pattern_short_slashes_are_substring():
    assert parse_string_pattern("//") == SubstringPattern("//")
    assert parse_string_pattern("/") == SubstringPattern("/")


def test_pattern_matching():
    substr = SubstringPattern("vim")
    assert substr.matches("nvim") is True
    assert substr.matches("VIM") is True
    assert substr.matches("nano") is False

    regex = RegexPattern("^cargo")
    assert regex.matches("cargo build") is True
    assert regex.matches("run cargo") is False


def test_regex_matches_rejects_bad_pattern():
    with pytest.raises(InvalidRegexError):
        RegexPattern("(").matches("x")


def test_pane_type_parse():
    assert PaneType.parse("Plugin") is PaneType.PLUGIN
    with pytest.raises(InvalidPaneTypeError):
        PaneType.parse("tile")


@pytest.mark.parametrize(
    "selector, expected",
    [
        (IdSelector(PaneType.TERMINAL, 42), {"type": "id", "pane_type": "terminal", "id": 42}),
        (FocusedSelector(), {"type": "focused"}),
        (
            TitleSelector(SubstringPattern("vim")),
            {"type": "title", "pattern": {"kind": "substring", "value": "vim"}},
        ),
        (
            CommandSelector(RegexPattern("^cargo")),
            {"type": "command", "pattern": {"kind": "regex", "pattern": "^cargo"}},
        ),
        (TabIndexSelector(2, 0), {"type": "tab_index", "tab": 2, "index": 0}),
    ],
)
def test_selector_dict_round_trip(selector, expected):
    assert selector_to_dict(selector) == expected
    assert selector_from_dict(expected) == selector


def test_pattern_dict_round_trip():
    pattern = RegexPattern("a+")
    assert pattern_from_dict(pattern_to_dict(pattern)) == pattern


@pytest.mark.parametrize(
    "data",
    [
        {"type": "nope"},
        {"type": "id", "pane_type": "Terminal", "id": 1},
        {"type": "id", "pane_type": "terminal", "id": -1},
        {"type": "tab_index", "tab": 1},
        {"type": "title", "pattern": {"kind": "glob", "value": "x"}},
    ],
)
def test_selector_from_dict_rejects_bad_data(data):
    with pytest.raises(ValueError):
        selector_from_dict(data)