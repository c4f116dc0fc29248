"""Tests for method dispatch and summaries."""

import logging

import pytest

from vcf_ancestry.autosomal import METHOD_ID as AUTOSOMAL_METHOD
from vcf_ancestry.estimator import (
    DECODING_METHODS,
    build_summary,
    estimate_origins,
    extract_haplogroup,
    method_ids,
)
from vcf_ancestry.haplogroup import UNDETERMINED_HAPLOGROUP, YHaplogroupAnalyzer
from vcf_ancestry.results import AnalysisResult, AnalysisStatus, OriginPortion


class TestDecodingMethods:

    def test_method_ids(self):
        assert method_ids() == ["autosomal_analysis", "y_haplogroup", "mt_haplogroup"]

    def test_methods_have_names_and_descriptions(self):
        for method in DECODING_METHODS:
            assert method.name
            assert method.description


class TestEstimateOrigins:
    """Test dispatch and the output guarantee."""

    def test_default_is_autosomal(self, default_reference, make_vcf):
        data = make_vcf([("15", 48426484, "rs1426654", "1/1")])

        result = estimate_origins(data, reference=default_reference)

        assert result.method == AUTOSOMAL_METHOD
        assert result.portions[0] == OriginPortion("Европа", 69)

    def test_unknown_method_runs_autosomal(self, default_reference, make_vcf, caplog):
        data = make_vcf([("15", 48426484, "rs1426654", "1/1")])

        with caplog.at_level(logging.WARNING):
            result = estimate_origins(data, method="admixture", reference=default_reference)

        assert result.method == AUTOSOMAL_METHOD
        assert "admixture" in caplog.text

    @pytest.mark.parametrize("method", ["y_haplogroup", "mt_haplogroup"])
    def test_haplogroup_methods(self, method, sample_vcf_path):
        result = estimate_origins(sample_vcf_path.read_bytes(), method=method)

        assert result.method == method
        assert result.status is AnalysisStatus.SUCCESS
        assert result.total_percent == 100

    def test_y_sample_tie(self, sample_vcf_path):
        result = estimate_origins(sample_vcf_path.read_bytes(), method="y_haplogroup")

        assert result.portions[0].region == "Y-гаплогруппа: R1a (Европа)"
        assert result.diagnostics['confidence'] == pytest.approx(0.2)

    @pytest.mark.parametrize("data", [
        b"", b"##fileformat=VCFv4.2\n", b"\xff\xfe\xfd", b"\x1f\x8b\x08\x00truncated",
    ])
    @pytest.mark.parametrize("method", [None, "y_haplogroup", "mt_haplogroup"])
    def test_never_empty(self, default_reference, data, method):
        result = estimate_origins(data, method=method, reference=default_reference)

        assert result.portions
        assert result.total_percent == 100

    def test_empty_distribution_replaced(self, monkeypatch):
        def empty_analyze(self, data):
            return AnalysisResult(portions=[], status=AnalysisStatus.SUCCESS,
                                  method=self.method_id)

        monkeypatch.setattr(YHaplogroupAnalyzer, "analyze", empty_analyze)

        result = estimate_origins(b"1\n2\n3\n", method="y_haplogroup")

        assert result.status is AnalysisStatus.FALLBACK
        assert result.method == "y_haplogroup"
        assert len(result.portions) == 5
        assert result.total_percent == 100


class TestExtractHaplogroup:

    @pytest.mark.parametrize("label,expected", [
        ("Y-гаплогруппа: R1a (Европа)", "R1a"),
        ("мт-гаплогруппа: L3 (Африка)", "L3"),
        ("мт-гаплогруппа: H", "H"),
        ("Y-гаплогруппа не определена", UNDETERMINED_HAPLOGROUP),
        ("Европа", UNDETERMINED_HAPLOGROUP),
        ("Y-гаплогруппа:  (Европа)", UNDETERMINED_HAPLOGROUP),
    ])
    def test_extract(self, label, expected):
        assert extract_haplogroup(label) == expected


class TestBuildSummary:

    def test_autosomal_summary(self, default_reference, sample_vcf_path):
        data = sample_vcf_path.read_bytes()
        result = estimate_origins(data, reference=default_reference)

        summary = build_summary("sample.vcf", result, data)

        assert summary == (
            f"Файл: sample.vcf, метод: autosomal_analysis, проанализировано SNP: 19, "
            f"найдено совпадений: 11, размер файла: {len(data)} байт"
        )

    def test_haplogroup_summary(self, sample_vcf_path):
        data = sample_vcf_path.read_bytes()
        result = estimate_origins(data, method="mt_haplogroup")

        summary = build_summary(None, result, data)

        assert summary.startswith("Файл: unknown, метод: mt_haplogroup, проанализировано SNP: 2,")
        assert "найдено совпадений: 2" in summary
