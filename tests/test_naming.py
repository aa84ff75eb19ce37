"""
tests/test_naming.py
Unit tests for jdlschema.naming.

Tests cover:
- Override precedence and case adaptation
- Irregular noun table
- Suffix heuristics, including the documented f/fe → ves behaviour
- singularize as an approximate inverse
- resource_plural path segments
"""

from __future__ import annotations

import pytest

from jdlschema.naming import (
    IRREGULAR_PLURALS,
    IRREGULAR_SINGULARS,
    lc_first,
    match_case,
    match_case_suffix,
    pluralize,
    resource_plural,
    singularize,
    uc_first,
)


# ===========================================================================
# String helpers
# ===========================================================================


class TestCaseHelpers:
    def test_lc_first(self) -> None:
        assert lc_first("OrderItem") == "orderItem"
        assert lc_first("") == ""
        assert lc_first("a") == "a"

    def test_uc_first(self) -> None:
        assert uc_first("orderItem") == "OrderItem"
        assert uc_first("") == ""

    def test_match_case_styles(self) -> None:
        assert match_case("PERSON", "people") == "PEOPLE"
        assert match_case("person", "People") == "people"
        assert match_case("Person", "people") == "People"

    def test_match_case_suffix_follows_last_character(self) -> None:
        assert match_case_suffix("BoX", "es") == "ES"
        assert match_case_suffix("BOx", "es") == "es"
        assert match_case_suffix("Box9", "s") == "s"


# ===========================================================================
# pluralize
# ===========================================================================


class TestPluralizeOverrides:
    def test_override_wins_over_irregular_table(self) -> None:
        assert pluralize("Person", {"person": "persons"}) == "Persons"

    def test_override_is_case_adapted(self) -> None:
        overrides = {"person": "people"}
        assert pluralize("Person", overrides) == "People"
        assert pluralize("PERSON", overrides) == "PEOPLE"
        assert pluralize("person", overrides) == "people"

    def test_override_key_matched_case_insensitively(self) -> None:
        assert pluralize("staff", {"Staff": "staff"}) == "staff"

    def test_override_wins_over_suffix_rules(self) -> None:
        assert pluralize("Chief", {"chief": "chiefs"}) == "Chiefs"

    def test_empty_override_value_is_ignored(self) -> None:
        assert pluralize("Box", {"box": ""}) == "Boxes"

    def test_overrides_do_not_leak_between_calls(self) -> None:
        assert pluralize("Box", {"box": "boxen"}) == "Boxen"
        assert pluralize("Box") == "Boxes"


class TestPluralizeIrregular:
    @pytest.mark.parametrize(
        "word, expected",
        [
            ("Person", "People"),
            ("child", "children"),
            ("MOUSE", "MICE"),
            ("Goose", "Geese"),
            ("tooth", "teeth"),
            ("Foot", "Feet"),
            ("ox", "oxen"),
            ("Man", "Men"),
        ],
    )
    def test_irregular(self, word: str, expected: str) -> None:
        assert pluralize(word) == expected

    def test_tables_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            IRREGULAR_PLURALS["cactus"] = "cacti"  # type: ignore[index]
        assert IRREGULAR_SINGULARS["people"] == "person"


class TestPluralizeSuffixRules:
    @pytest.mark.parametrize(
        "word, expected",
        [
            ("Order", "Orders"),
            ("Category", "Categories"),
            ("Day", "Days"),
            ("Box", "Boxes"),
            ("Church", "Churches"),
            ("Wish", "Wishes"),
            ("Buzz", "Buzzes"),
            ("Knife", "Knives"),
            ("Wolf", "Wolves"),
            ("Hero", "Heroes"),
            ("Video", "Videos"),
            ("Staff", "Staffs"),
            ("Giraffe", "Giraffes"),
        ],
    )
    def test_suffix_rules(self, word: str, expected: str) -> None:
        assert pluralize(word) == expected

    def test_words_ending_in_s_are_unchanged(self) -> None:
        assert pluralize("Status") == "Status"
        assert pluralize("posts") == "posts"

    def test_chief_uses_f_to_ves_heuristic(self) -> None:
        # Known limitation of the f/fe heuristic, kept on purpose.
        assert pluralize("Chief") == "Chieves"
        assert pluralize("roof") == "rooves"

    def test_suffix_case_follows_last_character(self) -> None:
        assert pluralize("BOX") == "BOXES"
        assert pluralize("CATEGORY") == "CATEGORIES"
        assert pluralize("orderITEM") == "orderITEMS"

    def test_empty_word(self) -> None:
        assert pluralize("") == ""

    def test_deterministic(self) -> None:
        assert pluralize("Address") == pluralize("Address")
        assert pluralize("orderItem") == "orderItems"


# ===========================================================================
# singularize
# ===========================================================================


class TestSingularize:
    @pytest.mark.parametrize(
        "word, expected",
        [
            ("Orders", "Order"),
            ("Categories", "Category"),
            ("Boxes", "Box"),
            ("Churches", "Church"),
            ("Chieves", "Chief"),
            ("People", "Person"),
            ("children", "child"),
            ("Class", "Class"),
            ("Order", "Order"),
        ],
    )
    def test_singularize(self, word: str, expected: str) -> None:
        assert singularize(word) == expected

    def test_not_a_true_inverse(self) -> None:
        assert pluralize("Knife") == "Knives"
        assert singularize("Knives") == "Knif"

    def test_overrides_are_inverted(self) -> None:
        assert singularize("Weblogs", {"blog": "weblogs"}) == "Blog"

    def test_empty_word(self) -> None:
        assert singularize("") == ""


# ===========================================================================
# resource_plural
# ===========================================================================


class TestResourcePlural:
    def test_default_is_lower_case_plural(self) -> None:
        assert resource_plural("Category") == "categories"
        assert resource_plural("OrderItem") == "orderitems"
        assert resource_plural("Person") == "people"

    def test_exact_key_wins(self) -> None:
        overrides = {"Blog": "Weblogs", "blog": "blogz"}
        assert resource_plural("Blog", overrides) == "weblogs"

    def test_case_insensitive_key(self) -> None:
        assert resource_plural("Blog", {"BLOG": "journals"}) == "journals"

    def test_empty_override_falls_back(self) -> None:
        assert resource_plural("Blog", {"Blog": ""}) == "blogs"
