"""
Trait lookup tests: normalization, exact -> genus -> containment order.
"""
from types import MappingProxyType

import pytest

from conftest import make_traits
from plant_database import (
    NO_TRAIT_MATCH,
    PLANT_DATABASE,
    MatchMethod,
    NoTraitMatch,
    display_name,
    find_plant_traits,
    normalize_name,
)


class TestNormalizeName:

    def test_lowercases_and_collapses_whitespace(self):
        assert normalize_name("  Olea   Europaea\t") == "olea europaea"


class TestFindPlantTraits:

    def test_exact_after_normalization(self):
        match = find_plant_traits("Olea Europaea")
        assert match.method == MatchMethod.EXACT
        assert match.key == "olea europaea"
        assert match.traits is PLANT_DATABASE["olea europaea"]

    def test_exact_with_noisy_whitespace(self):
        assert find_plant_traits("  OLEA   europaea ").method == MatchMethod.EXACT

    def test_genus_match(self):
        match = find_plant_traits("Allium schoenoprasum")
        assert match.method == MatchMethod.GENUS
        assert match.key == "allium"

    def test_name_contains_key(self, stub_table):
        match = find_plant_traits("Hybrid Rosa canina", stub_table)
        assert match.method == MatchMethod.FUZZY
        assert match.key == "rosa"

    def test_key_contains_genus(self):
        match = find_plant_traits("Lavandula stoechas")
        assert match.method == MatchMethod.FUZZY
        assert match.key == "lavandula angustifolia"

    def test_short_genus_lands_on_unrelated_key(self):
        # "ro" is inside "europaea"; kept as-is, first key in table order wins
        match = find_plant_traits("Ro sp.")
        assert match.method == MatchMethod.FUZZY
        assert match.key == "olea europaea"

    def test_containment_ties_follow_table_order(self):
        table = MappingProxyType({
            "salvia rosmarinus": make_traits(sun=5),
            "salvia officinalis": make_traits(sun=6),
        })
        assert find_plant_traits("Salvia nemorosa", table).key == "salvia rosmarinus"

    def test_no_match_is_distinct_variant(self):
        result = find_plant_traits("Zzyzx qwerty")
        assert result is NO_TRAIT_MATCH
        assert isinstance(result, NoTraitMatch)
        assert not result

    def test_empty_name(self):
        assert find_plant_traits("   ") is NO_TRAIT_MATCH

    def test_stub_table_isolated_from_real_one(self, stub_table):
        assert find_plant_traits("Lavandula angustifolia", stub_table) is NO_TRAIT_MATCH


class TestStaticTables:

    def test_trait_table_is_read_only(self):
        with pytest.raises(TypeError):
            PLANT_DATABASE["new plant"] = make_traits()

    def test_no_trait_match_is_singleton(self):
        assert NoTraitMatch() is NO_TRAIT_MATCH

    def test_display_name(self):
        assert display_name("Olea europaea") == "Olive Tree"
        assert display_name("laurus nobilis") == "Bay Laurel"

    def test_display_name_falls_back_to_scientific(self):
        assert display_name("rosa") == "rosa"
