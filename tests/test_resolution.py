"""Unit tests for prefix/unit resolution."""

from unitcode.definitions import DefinitionsTable, Prefix, Unit
from unitcode.parsing import decompose_prefixes, resolve_symbol


def _symbols(resolved):
    prefixes, unit = resolved
    return [p.symbol for p in prefixes], unit.symbol


class TestUnitPriority:
    """A listed unit always beats a prefix decomposition."""

    def test_kg_is_a_unit(self, definitions):
        assert _symbols(resolve_symbol(definitions, "kg")) == ([], "kg")

    def test_candela_beats_centi_day(self, definitions):
        assert _symbols(resolve_symbol(definitions, "cd")) == ([], "cd")

    def test_hectare_beats_hecto_annum(self, definitions):
        assert _symbols(resolve_symbol(definitions, "ha")) == ([], "ha")

    def test_pascal_beats_peta_annum(self, definitions):
        assert _symbols(resolve_symbol(definitions, "Pa")) == ([], "Pa")

    def test_minute_beats_milli_inch(self, definitions):
        assert _symbols(resolve_symbol(definitions, "min")) == ([], "min")


class TestTableOrder:
    """Ties between decompositions are broken by unit order."""

    def test_mega_kilogram(self, small_table):
        assert _symbols(resolve_symbol(small_table, "Mkg")) == (["M"], "kg")

    def test_gram_first_table(self):
        table = DefinitionsTable(
            prefixes=[Prefix("M", 6), Prefix("k", 3)],
            units=[Unit("g"), Unit("kg")],
        )
        assert _symbols(resolve_symbol(table, "Mkg")) == (["M", "k"], "g")

    def test_prefixed_units(self, definitions):
        assert _symbols(resolve_symbol(definitions, "mm")) == (["m"], "m")
        assert _symbols(resolve_symbol(definitions, "kPa")) == (["k"], "Pa")
        assert _symbols(resolve_symbol(definitions, "mcd")) == (["m"], "cd")
        assert _symbols(resolve_symbol(definitions, "µm")) == (["µ"], "m")

    def test_deca_listed_before_deci(self, definitions):
        """'dam' would also split as deci-atto-metre; deca comes first."""
        assert _symbols(resolve_symbol(definitions, "dam")) == (["da"], "m")

    def test_unknown_symbol(self, definitions):
        assert resolve_symbol(definitions, "furlong") is None

    def test_prefix_alone_is_not_a_unit(self, small_table):
        assert resolve_symbol(small_table, "M") is None


class TestPrefixDecomposition:
    """Test splitting a remainder into prefixes."""

    def test_empty_remainder(self, definitions):
        assert decompose_prefixes(definitions, "") is None

    def test_concatenated_prefixes(self, definitions):
        prefixes = decompose_prefixes(definitions, "kM")
        assert [p.symbol for p in prefixes] == ["k", "M"]

    def test_backtracks_over_dead_end(self):
        table = DefinitionsTable(prefixes=[Prefix("a", 1), Prefix("ab", 2), Prefix("c", 3)])
        prefixes = decompose_prefixes(table, "abc")
        assert [p.symbol for p in prefixes] == ["ab", "c"]

    def test_not_decomposable(self, definitions):
        assert decompose_prefixes(definitions, "kx") is None

    def test_long_prefix_run(self, definitions):
        prefixes = decompose_prefixes(definitions, "k" * 1500)
        assert len(prefixes) == 1500
        assert all(p.symbol == "k" for p in prefixes)

    def test_long_run_keeps_table_order(self):
        table = DefinitionsTable(prefixes=[Prefix("a", 1), Prefix("ab", 2), Prefix("c", 3)])
        prefixes = decompose_prefixes(table, "ab" * 1000 + "c")
        assert [p.symbol for p in prefixes] == ["ab"] * 1000 + ["c"]

    def test_long_undecomposable_run(self, definitions):
        assert decompose_prefixes(definitions, "k" * 3000 + "x") is None
