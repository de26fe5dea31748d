import pytest

from content_dedup.deduplication.similarity import (
    SimilarityCalculator, levenshtein_distance, string_similarity
)


@pytest.fixture
def similarity_calculator():
    return SimilarityCalculator(similarity_threshold=0.7)


class TestLevenshteinDistance:

    @pytest.mark.parametrize("a, b, expected", [
        ("", "", 0),
        ("", "abc", 3),
        ("abc", "", 3),
        ("abc", "abc", 0),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("gumbo", "gambol", 2),
    ])
    def test_known_distances(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_distance_is_symmetric(self):
        assert levenshtein_distance("saturday", "sunday") == levenshtein_distance("sunday", "saturday") == 3


class TestStringSimilarity:

    @pytest.mark.parametrize("text", ["", "a", "Project Plan", "  padded  ", "x" * 300])
    def test_identical_strings_score_one(self, text):
        assert string_similarity(text, text) == 1.0

    def test_case_and_surrounding_whitespace_are_ignored(self):
        assert string_similarity("  Hello World ", "hello world") == 1.0
        assert string_similarity("Kitten", "SITTING  ") == string_similarity("kitten", "sitting")

    def test_empty_rules(self):
        assert string_similarity("", "") == 1.0
        assert string_similarity("", "x") == 0.0
        assert string_similarity("x", "") == 0.0
        # Whitespace-only strings normalize to empty
        assert string_similarity("   ", "x") == 0.0
        assert string_similarity("   ", "") == 1.0

    def test_score_uses_longer_string_length(self):
        # distance 3 over the 7-character "sitting"
        assert string_similarity("kitten", "sitting") == pytest.approx(4 / 7)
        assert string_similarity("sitting", "kitten") == pytest.approx(4 / 7)

    def test_equal_length_strings(self):
        # Equal lengths: the second argument is the longer one; the score is
        # the same either way because both lengths match
        assert string_similarity("abcd", "abce") == pytest.approx(0.75)
        assert string_similarity("abce", "abcd") == pytest.approx(0.75)

    def test_one_character_edit(self):
        assert string_similarity("Project Plan", "Project Plann") == pytest.approx(12 / 13)

    def test_completely_different_strings(self):
        assert string_similarity("abc", "xyz") == 0.0

    def test_score_is_bounded(self):
        for a, b in [("a", "bbbbbbbb"), ("same", "Same"), ("hello", "help")]:
            assert 0.0 <= string_similarity(a, b) <= 1.0


class TestSimilarityCalculator:

    def test_calculate_similarity_matches_function(self, similarity_calculator):
        assert similarity_calculator.calculate_similarity("kitten", "sitting") == pytest.approx(4 / 7)

    def test_results_are_cached_by_normalized_pair(self, similarity_calculator):
        similarity_calculator.calculate_similarity("Kitten ", "sitting")
        assert ("kitten", "sitting") in similarity_calculator.calculation_cache

        similarity_calculator.clear_cache()
        assert similarity_calculator.calculation_cache == {}

    def test_cache_can_be_disabled(self):
        calculator = SimilarityCalculator(use_cache=False)
        assert calculator.calculate_similarity("abc", "abd") == pytest.approx(2 / 3)
        assert calculator.calculation_cache == {}

    def test_similarity_stats_with_too_few_texts(self, similarity_calculator):
        stats = similarity_calculator.get_similarity_stats(["only one"])
        assert stats['total_texts'] == 1
        assert stats['similarity_pairs'] == 0
        assert stats['potential_duplicates'] == 0

    def test_similarity_stats(self, similarity_calculator):
        stats = similarity_calculator.get_similarity_stats(["Project Plan", "Project Plann", "abc"])

        assert stats['total_texts'] == 3
        assert stats['similarity_pairs'] == 3
        assert stats['max_similarity'] == pytest.approx(12 / 13)
        assert stats['min_similarity'] >= 0.0
        assert stats['potential_duplicates'] == 1
        assert stats['duplication_rate'] == pytest.approx(1 / 3)
