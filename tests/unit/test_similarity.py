"""Tests for string similarity helpers."""
import pytest


class TestEditDistance:
    """Tests for edit_distance."""

    def test_classic_example(self):
        """Test kitten -> sitting needs three edits."""
        from timesheet.utils.similarity import edit_distance

        assert edit_distance("kitten", "sitting") == 3
        assert edit_distance("sitting", "kitten") == 3

    def test_case_insensitive(self):
        """Test case differences cost nothing."""
        from timesheet.utils.similarity import edit_distance

        assert edit_distance("Meeting", "meeting") == 0

    def test_empty_strings(self):
        """Test distance to an empty string is the other length."""
        from timesheet.utils.similarity import edit_distance

        assert edit_distance("", "") == 0
        assert edit_distance("abc", "") == 3
        assert edit_distance("", "abcd") == 4

    def test_single_edits(self):
        """Test insertion, deletion and substitution."""
        from timesheet.utils.similarity import edit_distance

        assert edit_distance("abc", "abcd") == 1
        assert edit_distance("abcd", "acd") == 1
        assert edit_distance("abc", "abd") == 1


class TestCalculateSimilarity:
    """Tests for calculate_similarity."""

    def test_identical(self):
        """Test identical strings are fully similar."""
        from timesheet.utils.similarity import calculate_similarity

        assert calculate_similarity("kitten", "kitten") == 1.0

    def test_one_substitution(self):
        """Test a single substitution in three characters."""
        from timesheet.utils.similarity import calculate_similarity

        assert calculate_similarity("abc", "abd") == pytest.approx(2 / 3)

    def test_empty_inputs_score_zero(self):
        """Test empty or missing inputs return 0, even when both are empty."""
        from timesheet.utils.similarity import calculate_similarity

        assert calculate_similarity("", "") == 0
        assert calculate_similarity("abc", "") == 0
        assert calculate_similarity(None, "abc") == 0

    def test_uses_longer_length(self):
        """Test the longer string is the denominator regardless of order."""
        from timesheet.utils.similarity import calculate_similarity

        assert calculate_similarity("abcd", "ab") == pytest.approx(0.5)
        assert calculate_similarity("ab", "abcd") == pytest.approx(0.5)

    def test_range(self):
        """Test completely different strings score 0."""
        from timesheet.utils.similarity import calculate_similarity

        assert calculate_similarity("abc", "xyz") == 0.0

    def test_lowercase_expansion_stays_in_range(self):
        """Test characters that lengthen when lowercased cannot go below 0."""
        from timesheet.utils.similarity import calculate_similarity

        assert calculate_similarity("İ", "x") == 0.0
        assert 0.0 <= calculate_similarity("İstanbul", "istanbul") <= 1.0
