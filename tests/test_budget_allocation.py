"""Tests for the expansion budget allocation model."""

from __future__ import annotations

import pandas as pd
import pytest

from sales_reports.config import EXPANSION_BUDGET
from sales_reports.relations import InputRelations
from sales_reports.reports.budget_allocation import (
    COLUMNS,
    allocation_weights,
    budget_allocation_report,
    territory_performance,
)
from tests.factories import sample_frames


def test_performance_ratios(relations: InputRelations) -> None:
    performance = territory_performance(relations).set_index('region')

    assert 'France FR' not in performance.index
    assert performance.loc['Northwest US', 'customer_count'] == 3
    assert performance.loc['Northwest US', 'cac'] == pytest.approx(100.0)
    assert performance.loc['Southwest US', 'profit_per_customer'] == pytest.approx(300.0)
    assert performance.loc['Canada CA', 'roi_ratio'] == pytest.approx(200.0 / 700.0)


def test_opportunity_scores_and_tiers(relations: InputRelations) -> None:
    report = budget_allocation_report(relations)

    assert list(report.columns) == COLUMNS
    assert report['region'].tolist() == ['Southwest US', 'Northwest US', 'Canada CA']
    by_region = report.set_index('region')
    # cheapest acquisition cost scores highest
    assert by_region['cac_quartile'].to_dict() == {'Southwest US': 2, 'Northwest US': 1, 'Canada CA': 3}
    assert by_region['opportunity_score'].to_dict() == {'Southwest US': 12, 'Northwest US': 8, 'Canada CA': 7}
    assert by_region.loc['Southwest US', 'investment_tier'] == 'Tier 2: Steady Growth (40% of budget)'
    assert by_region.loc['Northwest US', 'investment_tier'] == 'Tier 3: Maintain (20% of budget)'
    assert by_region.loc['Canada CA', 'investment_tier'] == 'Tier 4: Monitor Only (5% of budget)'


def test_weights_sum_to_one_and_drive_dollars(relations: InputRelations) -> None:
    report = budget_allocation_report(relations).set_index('region')

    assert report['allocation_weight'].sum() == pytest.approx(1.0, abs=1e-6)
    assert (report['allocation_weight'] >= 0).all()
    assert report.loc['Southwest US', 'allocation_weight'] == pytest.approx(14400 / 24700)
    assert report['dollar_allocation'].sum() == pytest.approx(EXPANSION_BUDGET)
    assert report.loc['Southwest US', 'projected_return'] == pytest.approx(
        report.loc['Southwest US', 'dollar_allocation'] * 1.0
    )
    assert report.loc['Northwest US', 'revenue_share'] == pytest.approx(500 / 2600)


def test_undefined_roi_gets_no_allocation() -> None:
    frames = sample_frames()
    frames['territories'].loc[0, 'cost_ytd'] = 0.0
    report = budget_allocation_report(InputRelations.from_frames(**frames)).set_index('region')

    northwest = report.loc['Northwest US']
    assert pd.isna(northwest['roi_ratio'])
    assert pd.isna(northwest['opportunity_score'])
    assert northwest['allocation_weight'] == 0.0
    assert northwest['investment_tier'] == 'Tier 4: Monitor Only (5% of budget)'
    assert report['allocation_weight'].sum() == pytest.approx(1.0, abs=1e-6)


def test_allocation_weights_ignore_missing_scores() -> None:
    weights = allocation_weights(
        pd.Series([4, pd.NA, 16], dtype='Int64'), pd.Series([100.0, 500.0, 100.0])
    )
    assert weights.tolist() == pytest.approx([0.2, 0.0, 0.8])


def test_custom_budget(relations: InputRelations) -> None:
    report = budget_allocation_report(relations, budget=1_000.0)
    assert report['dollar_allocation'].sum() == pytest.approx(1_000.0)


def test_empty_population(empty_relations: InputRelations) -> None:
    report = budget_allocation_report(empty_relations)
    assert report.empty
    assert list(report.columns) == COLUMNS
