"""Tests for score aggregation and normalization."""

import pytest

from vcf_ancestry.aggregation import AncestryAggregator, RegionScore, normalize_percentages
from vcf_ancestry.regions import Region

EUR_LEANING = dict(EUR=0.8, EAS=0.2, SAS=0.4, AFR=0.1, AMR=0.3)


def labels_and_percents(portions):
    return [(p.region, p.percent) for p in portions]


class TestRegionScore:

    def test_empty_score(self):
        score = RegionScore(Region.EUR)
        assert score.average_score == 0.0
        assert score.average_confidence == 0.0
        assert score.percentage == 0.0

    def test_averages(self):
        score = RegionScore(Region.EUR, total_score=1.2, marker_count=2, confidence_sum=180.0)
        assert score.average_score == pytest.approx(0.6)
        assert score.average_confidence == pytest.approx(90.0)
        assert score.percentage == pytest.approx(60.0)


class TestNormalizePercentages:
    """Test the integer rescaling rule."""

    def test_equal_candidates_give_residual_to_first_region(self):
        result = normalize_percentages({Region.EUR: 1.0, Region.EAS: 1.0, Region.SAS: 1.0})
        assert result == [(Region.EUR, 34), (Region.EAS, 33), (Region.SAS, 33)]

    def test_residual_goes_to_largest_candidate(self):
        result = normalize_percentages({Region.EAS: 10.0, Region.AFR: 20.0, Region.AMR: 5.0})
        assert result == [(Region.AFR, 58), (Region.EAS, 28), (Region.AMR, 14)]

    def test_zero_entries_dropped(self):
        assert normalize_percentages({Region.EUR: 99.5, Region.EAS: 0.6}) == [(Region.EUR, 100)]

    def test_single_candidate(self):
        assert normalize_percentages({Region.AMR: 3.0}) == [(Region.AMR, 100)]

    def test_empty(self):
        assert normalize_percentages({}) == []

    def test_sum_is_always_100(self):
        candidates = {Region.EUR: 33.3, Region.EAS: 21.7, Region.SAS: 14.9,
                      Region.AFR: 8.8, Region.AMR: 2.2}
        result = normalize_percentages(candidates)

        assert sum(p for _, p in result) == 100
        assert [p for _, p in result] == sorted((p for _, p in result), reverse=True)


class TestAncestryAggregator:
    """Test accumulation across markers."""

    def test_single_homozygous_alternate_marker(self, make_marker):
        aggregator = AncestryAggregator()
        aggregator.add_marker("1/1", make_marker("rs1426654", **EUR_LEANING))

        portions = aggregator.normalize()

        assert labels_and_percents(portions) == [
            ("Европа", 69),
            ("Южная Азия", 17),
            ("Америка", 9),
            ("Восточная Азия", 4),
            ("Африка", 1),
        ]

    def test_single_homozygous_reference_marker(self, make_marker):
        aggregator = AncestryAggregator()
        aggregator.add_marker("0/0", make_marker("rs1426654", **EUR_LEANING))

        portions = aggregator.normalize()

        assert labels_and_percents(portions) == [
            ("Африка", 37),
            ("Восточная Азия", 27),
            ("Америка", 20),
            ("Южная Азия", 15),
            ("Европа", 1),
        ]

    def test_english_labels(self, make_marker):
        aggregator = AncestryAggregator()
        aggregator.add_marker("1/1", make_marker("rs1", **EUR_LEANING))

        assert aggregator.normalize("en")[0].region == "Europe"

    def test_low_signal_region_dropped(self, make_marker):
        aggregator = AncestryAggregator()
        aggregator.add_marker("1/1", make_marker(
            "rs_afr", EUR=0.1, EAS=0.05, SAS=0.1, AFR=0.9, AMR=0.2))

        candidates = aggregator.candidate_percentages()

        assert Region.EAS not in candidates
        assert labels_and_percents(aggregator.normalize()) == [
            ("Африка", 94),
            ("Америка", 4),
            ("Европа", 1),
            ("Южная Азия", 1),
        ]

    def test_cutoff_is_exclusive(self, make_marker):
        aggregator = AncestryAggregator(low_signal_cutoff=50.0)
        aggregator.scores[Region.EUR] = RegionScore(Region.EUR, total_score=0.5, marker_count=1)
        aggregator.marker_count = 1

        assert aggregator.candidate_percentages() == {}
        assert aggregator.normalize() is None

    def test_unrecognised_genotype_gives_no_portions(self, make_marker):
        aggregator = AncestryAggregator()
        aggregator.add_marker("0|1", make_marker("rs1", **EUR_LEANING))

        assert aggregator.marker_count == 1
        assert aggregator.normalize() is None

    def test_markers_are_averaged(self, make_marker):
        aggregator = AncestryAggregator()
        aggregator.add_marker("1/1", make_marker("rs1", quality=90.0, **EUR_LEANING))
        aggregator.add_marker("0/0", make_marker("rs2", quality=80.0, **EUR_LEANING))

        eur = aggregator.scores[Region.EUR]
        assert eur.marker_count == 2
        assert eur.average_score == pytest.approx((0.64 + 0.04) / 2)
        assert eur.average_confidence == pytest.approx(85.0)
        assert sum(p.percent for p in aggregator.normalize()) == 100

    def test_region_without_frequency_is_not_scored(self, make_marker):
        aggregator = AncestryAggregator()
        aggregator.add_marker("1/1", make_marker("rs1", EUR=0.5, AFR=0.5))

        assert aggregator.scores[Region.EAS].marker_count == 0
        assert labels_and_percents(aggregator.normalize()) == [("Европа", 50), ("Африка", 50)]
