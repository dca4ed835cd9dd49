"""Unit tests for amount candidate extraction and ranking."""
import pytest

from order_intake.core.amount import AmountCandidate
from order_intake.services.amounts.extractor import extract_amounts, rank_candidates


class TestPatternFamilies:
    @pytest.mark.parametrize("text, amount, source, weight", [
        ("Transfer Berhasil\nRp 235.000", 235000, "rp_separated", 10),
        ("Rp235000", 235000, "rp_digits", 9),
        ("Total: 150.000", 150000, "keyword", 7),
        ("150.000 rupiah", 150000, "rupiah_suffix", 6),
        ("Berhasil 75.000", 75000, "standalone_grouped", 4),
        ("Dana masuk 50000", 50000, "standalone_digits", 3),
    ])
    def test_family_detected(self, text, amount, source, weight):
        selected = extract_amounts(text).selected
        assert selected.amount == amount
        assert selected.source == source
        assert selected.weight == weight

    def test_original_text_is_kept(self):
        selected = extract_amounts("Rp 1,250,000").selected
        assert selected.amount == 1250000
        assert selected.original == "Rp 1,250,000"


class TestStandaloneFiltering:
    def test_standalone_skipped_when_anchored_amount_exists(self):
        selection = extract_amounts("Rp 235.000\nBiaya admin 75.000")
        assert [c.amount for c in selection.candidates] == [235000]

    def test_account_number_rejected(self):
        assert not extract_amounts("Rekening 1234567").ok

    def test_six_digit_number_treated_as_reference(self):
        assert not extract_amounts("Kode 150000").ok

    def test_number_near_date_rejected(self):
        assert not extract_amounts("12 Jan 45.000").ok


class TestRange:
    def test_below_minimum_ignored(self):
        assert not extract_amounts("Rp 5.000").ok

    def test_custom_maximum(self):
        assert not extract_amounts("Rp 235.000", max_amount=200_000).ok

    def test_custom_minimum(self):
        assert extract_amounts("Rp 5.000", min_amount=1_000).selected.amount == 5000


class TestRanking:
    def test_higher_weight_first(self):
        selection = extract_amounts("Total: 150.000\nRp 235.000")
        assert [c.amount for c in selection.candidates] == [235000, 150000]
        assert selection.count == 2

    def test_equal_weight_smaller_amount_first(self):
        selection = extract_amounts("Rp 50.000 Rp 25.000")
        assert [c.amount for c in selection.candidates] == [25000, 50000]

    def test_repeated_amount_kept_once(self):
        selection = extract_amounts("Rp 235.000\nTotal: 235.000")
        assert selection.count == 1
        assert selection.selected.source == "rp_separated"

    def test_rank_candidates_first_occurrence_wins(self):
        ranked = rank_candidates([
            AmountCandidate(amount=20000, original="20.000", weight=4, source="standalone_grouped"),
            AmountCandidate(amount=20000, original="Rp 20.000", weight=10, source="rp_separated"),
            AmountCandidate(amount=30000, original="Rp 30.000", weight=10, source="rp_separated"),
        ])
        assert [(c.amount, c.weight) for c in ranked] == [(30000, 10), (20000, 4)]


class TestEmptyInput:
    @pytest.mark.parametrize("text", [None, "", "Transfer berhasil"])
    def test_no_candidates(self, text):
        selection = extract_amounts(text)
        assert selection.ok is False
        assert selection.selected is None
        assert selection.count == 0


class TestRankCandidates:
    def test_same_amount_from_two_families_kept_once(self):
        ranked = rank_candidates([
            AmountCandidate(amount=50000, original="Rp 50.000", weight=10, source="rp_separated"),
            AmountCandidate(amount=50000, original="50.000", weight=4, source="standalone_grouped"),
        ])
        assert len(ranked) == 1
        assert ranked[0].weight == 10

    def test_tie_on_weight_selects_smaller_amount(self):
        ranked = rank_candidates([
            AmountCandidate(amount=30000, original="Rp 30.000", weight=10, source="rp_separated"),
            AmountCandidate(amount=25000, original="Rp 25.000", weight=10, source="rp_separated"),
        ])
        assert ranked[0].amount == 25000
