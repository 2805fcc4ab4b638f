import pytest
from datetime import datetime, timezone
from taskengine.dates import resolve_date_expression, is_date_expression

UTC = timezone.utc


def test_iso_date_is_midnight():
    r = resolve_date_expression('2025-12-31', datetime(2025, 6, 15, 12, 0, tzinfo=UTC))
    assert r == datetime(2025, 12, 31, 0, 0, tzinfo=UTC)


def test_iso_leap_day_valid():
    r = resolve_date_expression('2024-02-29', datetime(2025, 6, 15, 12, 0, tzinfo=UTC))
    assert r == datetime(2024, 2, 29, tzinfo=UTC)


@pytest.mark.parametrize('expr', ['2025-02-29', '2025-13-01', '2025-01-45', '2025-00-10', '2025-1-5', '25-01-05'])
def test_iso_invalid_or_malformed_is_none(ref, expr):
    assert resolve_date_expression(expr, ref) is None


@pytest.mark.parametrize('expr,expected', [
    ('+3d', datetime(2025, 6, 18, 12, 0, tzinfo=UTC)),
    ('-5d', datetime(2025, 6, 10, 12, 0, tzinfo=UTC)),
    ('+0d', datetime(2025, 6, 15, 12, 0, tzinfo=UTC)),
    ('+2w', datetime(2025, 6, 29, 12, 0, tzinfo=UTC)),
    ('-1w', datetime(2025, 6, 8, 12, 0, tzinfo=UTC)),
    ('+2m', datetime(2025, 8, 15, 12, 0, tzinfo=UTC)),
    ('-3m', datetime(2025, 3, 15, 12, 0, tzinfo=UTC)),
    ('+1y', datetime(2026, 6, 15, 12, 0, tzinfo=UTC)),
    ('-2y', datetime(2023, 6, 15, 12, 0, tzinfo=UTC)),
    ('+20d', datetime(2025, 7, 5, 12, 0, tzinfo=UTC)),
    ('+3D', datetime(2025, 6, 18, 12, 0, tzinfo=UTC)),
])
def test_relative_offsets_keep_time_of_day(ref, expr, expected):
    assert resolve_date_expression(expr, ref) == expected


def test_month_offset_clamps_to_month_end():
    # Jan 31 + 1 month lands on the last day of February
    assert resolve_date_expression('+1m', datetime(2025, 1, 31, 8, 0, tzinfo=UTC)) == datetime(2025, 2, 28, 8, 0, tzinfo=UTC)
    assert resolve_date_expression('+1m', datetime(2024, 1, 31, 8, 0, tzinfo=UTC)) == datetime(2024, 2, 29, 8, 0, tzinfo=UTC)
    assert resolve_date_expression('-1m', datetime(2025, 3, 31, 8, 0, tzinfo=UTC)) == datetime(2025, 2, 28, 8, 0, tzinfo=UTC)


def test_year_offset_from_leap_day_clamps():
    assert resolve_date_expression('+1y', datetime(2024, 2, 29, tzinfo=UTC)) == datetime(2025, 2, 28, tzinfo=UTC)
    assert resolve_date_expression('+4y', datetime(2024, 2, 29, tzinfo=UTC)) == datetime(2028, 2, 29, tzinfo=UTC)


@pytest.mark.parametrize('expr', ['+3x', '3d', '+d', '++3d', '+3dd', '+ 3d', '+99999999y'])
def test_relative_malformed_is_none(ref, expr):
    assert resolve_date_expression(expr, ref) is None


@pytest.mark.parametrize('expr,expected', [
    ('today', datetime(2025, 6, 15, 0, 0, tzinfo=UTC)),
    ('tomorrow', datetime(2025, 6, 16, 0, 0, tzinfo=UTC)),
    ('yesterday', datetime(2025, 6, 14, 0, 0, tzinfo=UTC)),
    ('som', datetime(2025, 6, 1, 0, 0, tzinfo=UTC)),
    ('eom', datetime(2025, 6, 30, 23, 59, 59, tzinfo=UTC)),
    ('soy', datetime(2025, 1, 1, 0, 0, tzinfo=UTC)),
    ('eoy', datetime(2025, 12, 31, 23, 59, 59, tzinfo=UTC)),
    ('  Tomorrow ', datetime(2025, 6, 16, 0, 0, tzinfo=UTC)),
    ('EOM', datetime(2025, 6, 30, 23, 59, 59, tzinfo=UTC)),
])
def test_named_dates(ref, expr, expected):
    assert resolve_date_expression(expr, ref) == expected


def test_eom_leap_february():
    r = resolve_date_expression('eom', datetime(2024, 2, 15, 12, 0, tzinfo=UTC))
    assert r == datetime(2024, 2, 29, 23, 59, 59, tzinfo=UTC)


def test_eom_non_leap_february_and_december():
    assert resolve_date_expression('eom', datetime(2023, 2, 10, tzinfo=UTC)) == datetime(2023, 2, 28, 23, 59, 59, tzinfo=UTC)
    assert resolve_date_expression('eom', datetime(2025, 12, 3, tzinfo=UTC)) == datetime(2025, 12, 31, 23, 59, 59, tzinfo=UTC)


def test_tomorrow_crosses_year_boundary():
    r = resolve_date_expression('tomorrow', datetime(2025, 12, 31, 22, 0, tzinfo=UTC))
    assert r == datetime(2026, 1, 1, tzinfo=UTC)


@pytest.mark.parametrize('expr,expected_day', [
    ('monday', 16),
    ('tuesday', 17),
    ('friday', 20),
    ('saturday', 21),
    # reference is a Sunday: the next Sunday, never the same day
    ('sunday', 22),
    ('  FRIDAY ', 20),
])
def test_weekday_is_next_occurrence(ref, expr, expected_day):
    r = resolve_date_expression(expr, ref)
    assert r == datetime(2025, 6, expected_day, 0, 0, tzinfo=UTC)


def test_weekday_rolls_into_next_month():
    # Monday 30 June 2025 -> next Monday 7 July
    r = resolve_date_expression('monday', datetime(2025, 6, 30, 18, 0, tzinfo=UTC))
    assert r == datetime(2025, 7, 7, tzinfo=UTC)


@pytest.mark.parametrize('expr', ['', '   ', 'next', 'mon', 'milk', 'p1', '#work', 'tomorrow!', 'in 3 days'])
def test_unrecognized_is_none(ref, expr):
    assert resolve_date_expression(expr, ref) is None
    assert not is_date_expression(expr, ref)


def test_none_is_none(ref):
    assert resolve_date_expression(None, ref) is None


def test_naive_reference_gives_naive_results():
    naive = datetime(2025, 6, 15, 12, 0)
    assert resolve_date_expression('+3d', naive) == datetime(2025, 6, 18, 12, 0)
    assert resolve_date_expression('2025-12-31', naive).tzinfo is None
    assert resolve_date_expression('eoy', naive).tzinfo is None


def test_is_date_expression(ref):
    assert is_date_expression('tomorrow', ref)
    assert is_date_expression('2025-01-01', ref)


@pytest.mark.parametrize('expr', ['+٣d', '-２w', '٢٠٢٥-01-01', '2025-٠١-15'])
def test_non_ascii_digits_are_not_dates(ref, expr):
    assert resolve_date_expression(expr, ref) is None
