"""Tests for natural-language filter parsing."""

import pytest

from app.nl_parser import (
    CONFLICT_MESSAGE,
    UNPARSED_MESSAGE,
    ParseConflict,
    ParseSuccess,
    ParseUnparsed,
    collect_assignments,
    parse_natural_language_query,
)


def parsed_filters(query):
    result = parse_natural_language_query(query)
    assert isinstance(result, ParseSuccess), result
    return result.filters.model_dump(exclude_none=True)


class TestSuccess:
    def test_single_word_palindromic(self):
        assert parsed_filters("all single word palindromic strings") == {
            "word_count": 1,
            "is_palindrome": True,
        }

    def test_longer_than(self):
        assert parsed_filters("strings longer than 10") == {"min_length": 11}

    def test_longer_than_with_unit(self):
        assert parsed_filters("strings longer than 10 characters") == {"min_length": 11}

    def test_shorter_than(self):
        assert parsed_filters("strings shorter than 5 characters") == {"max_length": 4}

    def test_length_range(self):
        assert parsed_filters("longer than 2 and shorter than 10") == {
            "min_length": 3,
            "max_length": 9,
        }

    def test_palindrome_noun(self):
        assert parsed_filters("show me every palindrome") == {"is_palindrome": True}

    def test_one_word(self):
        assert parsed_filters("one word strings") == {"word_count": 1}

    def test_first_vowel(self):
        assert parsed_filters("palindromic strings that contain the first vowel") == {
            "is_palindrome": True,
            "contains_character": "a",
        }

    def test_containing_the_letter(self):
        assert parsed_filters("strings containing the letter z") == {"contains_character": "z"}

    def test_contain_letter_without_article(self):
        assert parsed_filters("strings that contain letter q") == {"contains_character": "q"}

    def test_contains_the_character(self):
        assert parsed_filters("strings that contain the character 7") == {"contains_character": "7"}

    def test_character_followed_by_punctuation(self):
        assert parsed_filters("strings containing the character z.") == {"contains_character": "z"}
        assert parsed_filters("containing the character z, please") == {"contains_character": "z"}

    def test_characters_plural_is_not_a_character(self):
        assert isinstance(
            parse_natural_language_query("strings containing the characters"), ParseUnparsed
        )

    def test_query_is_case_insensitive(self):
        assert parsed_filters("Strings CONTAINING the Letter Z") == {"contains_character": "z"}

    def test_repeated_identical_assignment_is_not_a_conflict(self):
        assert parsed_filters("palindromic strings, palindrome only") == {"is_palindrome": True}
        assert parsed_filters("first vowel, containing the letter a") == {"contains_character": "a"}

    def test_phrase_order_does_not_matter(self):
        assert parsed_filters("single word palindromic strings") == parsed_filters(
            "palindromic strings made of a single word"
        )


class TestUnparsed:
    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank(self, query):
        result = parse_natural_language_query(query)
        assert isinstance(result, ParseUnparsed)
        assert result.message == UNPARSED_MESSAGE

    def test_gibberish(self):
        assert isinstance(parse_natural_language_query("asdkjasd"), ParseUnparsed)

    def test_letters_plural_is_not_a_letter(self):
        assert isinstance(parse_natural_language_query("strings containing the letters"), ParseUnparsed)


class TestConflict:
    def test_two_different_characters(self):
        result = parse_natural_language_query(
            "strings containing the first vowel and containing the letter z"
        )
        assert isinstance(result, ParseConflict)
        assert result.message == CONFLICT_MESSAGE

    def test_two_different_min_lengths(self):
        result = parse_natural_language_query("longer than 10 and also longer than 20")
        assert isinstance(result, ParseConflict)

    def test_min_length_above_max_length(self):
        result = parse_natural_language_query("longer than 10 but shorter than 5")
        assert isinstance(result, ParseConflict)

    def test_shorter_than_zero(self):
        assert isinstance(parse_natural_language_query("shorter than 0"), ParseConflict)

    def test_conflict_wins_over_other_valid_phrases(self):
        result = parse_natural_language_query(
            "single word palindromes containing the letter b and containing the letter c"
        )
        assert isinstance(result, ParseConflict)


def test_collect_assignments_reports_every_occurrence():
    assignments = collect_assignments("containing the letter x or containing the letter y")
    assert assignments == [("contains_character", "x"), ("contains_character", "y")]
