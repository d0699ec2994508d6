"""Tests for cross-sell opportunity identification."""

from __future__ import annotations

import itertools

import pandas as pd
import pytest

from sales_reports.relations import InputRelations
from sales_reports.reports.cross_sell import (
    REPORT_COLUMNS,
    category_performance,
    cross_sell_detail,
    cross_sell_report,
    missing_category_pairs,
    purchased_categories,
)


def test_only_high_margin_categories_qualify(relations: InputRelations) -> None:
    performance = category_performance(relations)
    assert performance['category_name'].tolist() == ['Bikes']
    assert performance['avg_margin'].iloc[0] == pytest.approx(1400.0)
    assert performance['customer_count'].iloc[0] == 3


def test_purchased_categories_are_distinct(relations: InputRelations) -> None:
    pairs = purchased_categories(relations)
    assert not pairs.duplicated().any()
    assert (1, 1) in set(map(tuple, pairs[['customer_id', 'category_id']].to_numpy().tolist()))


def test_complement_partitions_cross_product() -> None:
    scope = pd.DataFrame({'customer_id': [1, 2, 3], 'territory': ['N', 'N', 'S']})
    categories = pd.DataFrame({'category_id': [10, 20]})
    observed = pd.DataFrame({'customer_id': [1, 1, 3, 4], 'category_id': [10, 10, 20, 10]})

    missing = missing_category_pairs(scope, categories, observed)
    missing_pairs = set(zip(missing['customer_id'], missing['category_id']))

    full = set(itertools.product([1, 2, 3], [10, 20]))
    observed_in_scope = set(zip(observed['customer_id'], observed['category_id'])) & full
    assert missing_pairs == {(1, 20), (2, 10), (2, 20), (3, 10)}
    assert missing_pairs.isdisjoint(observed_in_scope)
    assert missing_pairs | observed_in_scope == full
    assert set(missing.columns) == {'customer_id', 'territory', 'category_id'}


def test_detail_counts_and_potential_revenue(relations: InputRelations) -> None:
    detail = cross_sell_detail(relations).set_index('territory')

    assert detail.loc['Northwest US', 'potential_customers'] == 2
    assert detail.loc['Northwest US', 'missing_category'] == 'Bikes'
    assert detail.loc['Northwest US', 'potential_revenue'] == pytest.approx(2 * 1400.0 * 2.5)
    assert detail.loc['Southwest US', 'potential_customers'] == 1
    assert detail.loc['Canada CA', 'potential_customers'] == 1


def test_territory_priority_against_upper_quartile(relations: InputRelations) -> None:
    report = cross_sell_report(relations)

    assert list(report.columns) == REPORT_COLUMNS
    assert report['territory'].iloc[0] == 'Northwest US'
    assert report['q3_customers'].iloc[0] == pytest.approx(1.5)
    by_territory = report.set_index('territory')
    assert by_territory.loc['Northwest US', 'opportunity_priority'] == 'High Priority (Top 25%)'
    assert by_territory.loc['Southwest US', 'opportunity_priority'] == 'Medium Priority'
    assert by_territory.loc['Canada CA', 'number_of_opportunities'] == 1
    assert by_territory.loc['Canada CA', 'total_potential_revenue'] == pytest.approx(3500.0)


def test_no_high_margin_category_yields_empty_report(frames: dict[str, pd.DataFrame]) -> None:
    frames['products']['list_price'] = frames['products']['standard_cost'] + 50.0
    report = cross_sell_report(InputRelations.from_frames(**frames))
    assert report.empty
    assert list(report.columns) == REPORT_COLUMNS


def test_unnamed_category_still_qualifies(frames: dict[str, pd.DataFrame]) -> None:
    frames['categories'].loc[0, 'name'] = None
    performance = category_performance(InputRelations.from_frames(**frames), threshold=0)

    assert sorted(performance['category_id'].tolist()) == [1, 2, 3]
    bikes = performance[performance['category_id'] == 1].iloc[0]
    assert pd.isna(bikes['category_name'])
    assert bikes['avg_margin'] == pytest.approx(1400.0)
