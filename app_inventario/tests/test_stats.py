import pytest

from app_inventario.services.dates import local_day
from app_inventario.services.stats_service import (
    StatsService,
    group_sales_by_day,
    paginate,
    sales_in_period,
    summary_totals,
)
from app_inventario.tests.factories import sale


def test_late_utc_sales_fall_on_the_same_local_day():
    sales = [
        sale('s1', '2024-03-10T23:30:00Z', [('p1', 1, 100.0)]),
        sale('s2', '2024-03-11T00:30:00Z', [('p1', 1, 100.0)]),
    ]
    days = group_sales_by_day(sales)
    assert days == [{'date': '2024-03-10', 'count': 2, 'total': 200.0}]


def test_local_day_boundary_is_three_utc():
    assert local_day('2024-03-11T02:59:00Z') == '2024-03-10'
    assert local_day('2024-03-11T03:00:00Z') == '2024-03-11'
    assert local_day('2024-03-11T00:30:00-03:00') == '2024-03-11'


def test_date_only_values_are_not_shifted():
    assert local_day('2024-03-11') == '2024-03-11'


def test_naive_timestamps_are_utc():
    assert local_day('2024-03-11T01:00:00') == '2024-03-10'


def test_total_uses_sale_total_amount_not_line_sum():
    sales = [sale('s1', '2024-03-10T15:00:00Z', [('p1', 2, 100.0)], total=150.0)]
    assert group_sales_by_day(sales)[0]['total'] == 150.0


def test_order_and_inclusive_range():
    sales = [
        sale('a', '2024-03-09T15:00:00Z', [('p1', 1, 10.0)]),
        sale('b', '2024-03-10T15:00:00Z', [('p1', 1, 10.0)]),
        sale('c', '2024-03-11T15:00:00Z', [('p1', 1, 10.0)]),
        sale('d', '2024-03-12T15:00:00Z', [('p1', 1, 10.0)]),
    ]
    asc = group_sales_by_day(sales, '2024-03-10', '2024-03-11')
    desc = group_sales_by_day(sales, '2024-03-10', '2024-03-11', descending=True)

    assert [d['date'] for d in asc] == ['2024-03-10', '2024-03-11']
    assert [d['date'] for d in desc] == ['2024-03-11', '2024-03-10']


def test_unparsable_dates_are_skipped():
    sales = [
        sale('a', 'ayer', [('p1', 1, 10.0)]),
        sale('b', '2024-03-10T15:00:00Z', [('p1', 1, 10.0)]),
    ]
    assert group_sales_by_day(sales) == [{'date': '2024-03-10', 'count': 1, 'total': 10.0}]


def test_summary_totals():
    days = [{'date': 'x', 'count': 2, 'total': 10.1}, {'date': 'y', 'count': 1, 'total': 0.2}]
    assert summary_totals(days) == {'count': 3, 'total': pytest.approx(10.3)}


def test_sales_in_period_most_recent_first():
    sales = [
        sale('a', '2024-03-10T10:00:00Z', [('p1', 1, 10.0)]),
        sale('b', '2024-03-10T18:00:00Z', [('p1', 1, 10.0)]),
        sale('c', '2024-03-01T18:00:00Z', [('p1', 1, 10.0)]),
    ]
    result = sales_in_period(sales, '2024-03-05', '2024-03-31')
    assert [s.id for s in result] == ['b', 'a']


def test_paginate():
    items = list(range(23))

    first = paginate(items, 1)
    assert first['items'] == list(range(10))
    assert first['pages'] == 3
    assert first['total'] == 23

    last = paginate(items, 99)
    assert last['page'] == 3
    assert last['items'] == [20, 21, 22]

    empty = paginate([], 1)
    assert empty == {'items': [], 'page': 1, 'pages': 1, 'total': 0}


def test_stats_service_uses_loader():
    sales = [
        sale('a', '2024-03-10T10:00:00Z', [('p1', 1, 10.0)]),
        sale('b', '2024-03-11T10:00:00Z', [('p1', 2, 10.0)]),
    ]
    service = StatsService(lambda: sales)

    report = service.sales_by_day('2024-03-01', '2024-03-31', order='asc')
    assert [d['date'] for d in report['days']] == ['2024-03-10', '2024-03-11']
    assert report['summary'] == {'count': 2, 'total': 30.0}

    page = service.transactions('2024-03-01', '2024-03-31')
    assert [s['id'] for s in page['items']] == ['b', 'a']


def test_stats_service_without_loader_is_empty():
    report = StatsService().sales_by_day('2024-03-01', '2024-03-31')
    assert report['days'] == []
    assert report['summary'] == {'count': 0, 'total': 0}
