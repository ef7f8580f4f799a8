import pytest

from market import parser


@pytest.mark.parametrize(
    "text,slope,intercept",
    [
        ("-P + 16", -1.0, 16.0),
        ("2P+10", 2.0, 10.0),
        ("50 - 3P", -3.0, 50.0),
        ("2*P + 10", 2.0, 10.0),
        ("p", 1.0, 0.0),
        ("+P", 1.0, 0.0),
        ("10", 0.0, 10.0),
        ("0.5P - 2", 0.5, -2.0),
        (" 2 P + 3p + 1 ", 5.0, 1.0),
        ("4 + 2 - P", -1.0, 6.0),
    ],
)
def test_parse_equation_valid(text: str, slope: float, intercept: float) -> None:
    parsed = parser.parse_equation(text)
    assert parsed.ok
    assert parsed.error is None
    assert parsed.slope == pytest.approx(slope)
    assert parsed.intercept == pytest.approx(intercept)


@pytest.mark.parametrize(
    "text",
    ["", "   ", "2P+", "abc", "2P+10abc", "1..2P", "*P", "2*", "2P3", "P P", ".P", "2x+1"],
)
def test_parse_equation_invalid(text: str) -> None:
    parsed = parser.parse_equation(text)
    assert not parsed.ok
    assert parsed.error
    assert (parsed.slope, parsed.intercept) == (0.0, 0.0)


def test_parse_equation_accepts_none() -> None:
    parsed = parser.parse_equation(None)
    assert "empty" in parsed.error


def test_tokenize_terms_and_implicit_coefficient() -> None:
    terms = parser.tokenize("-P + 16")
    assert terms == [
        parser.Term(sign=-1, coefficient=None, is_price=True),
        parser.Term(sign=1, coefficient=16.0, is_price=False),
    ]
    assert terms[0].value == -1.0
    assert terms[1].value == 16.0


def test_tokenize_error_messages_carry_hint() -> None:
    with pytest.raises(parser.EquationError) as exc:
        parser.tokenize("2P + ")
    assert "dangling" in str(exc.value)
    assert parser.FORMAT_HINT in str(exc.value)

    with pytest.raises(parser.EquationError, match="Unexpected character 'a'"):
        parser.tokenize("2Pa")


def test_equation_error_is_value_error() -> None:
    assert issubclass(parser.EquationError, ValueError)


def test_accumulate_rejects_empty_and_non_finite() -> None:
    with pytest.raises(parser.EquationError):
        parser.accumulate([])
    huge = parser.Term(sign=1, coefficient=1e308, is_price=True)
    with pytest.raises(parser.EquationError, match="finite"):
        parser.accumulate([huge, huge])
