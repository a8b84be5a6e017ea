"""Tests for schema building.

Tests directive handling, header normalization, type resolution, the
flags row and the per-row field maps.
"""

from sheetschema.core.models.base import ResolvedType, WarningLevel
from sheetschema.schema import GenerationOptions, build_schema
from sheetschema.sources.csv import ParserConfig, parse_table


def build(text: str, header_rows: int = 1, **options):
    raw = parse_table(text, ParserConfig(delimiter=",", header_row_count=header_rows))
    return build_schema(raw, GenerationOptions(header_row_count=header_rows, **options))


class TestDirectives:
    """Tests for class, database and namespace naming."""

    def test_defaults(self):
        """Test naming without directives."""
        schema = build("Id\n1\n")

        assert schema.class_name == "GeneratedEntry"
        assert schema.database_name == "GeneratedEntryDatabase"
        assert schema.namespace_name is None

    def test_directives_set_names(self):
        """Test that directives override defaults."""
        schema = build("#class:Item\n#namespace:Game.Data\nId\n1\n")

        assert schema.class_name == "Item"
        assert schema.database_name == "ItemDatabase"
        assert schema.namespace_name == "Game.Data"

    def test_explicit_database_directive(self):
        """Test that a database directive is used as given."""
        schema = build("#class:Item\n#database:Loot\nId\n1\n")

        assert schema.database_name == "Loot"

    def test_later_directive_wins(self):
        """Test that the last directive of a kind is used."""
        schema = build("#class:First\n#class:Second\nId\n1\n")

        assert schema.class_name == "Second"

    def test_options_supply_defaults(self):
        """Test option defaults below directives."""
        schema = build("Id\n1\n", class_name="Weapon", namespace_name="Armory")

        assert schema.class_name == "Weapon"
        assert schema.database_name == "WeaponDatabase"
        assert schema.namespace_name == "Armory"

    def test_source_table_name(self):
        """Test that the table name comes from options or the class name."""
        assert build("Id\n1\n", table_name="weapons").source_table_name == "weapons"
        assert build("#class:Item\nId\n1\n").source_table_name == "Item"


class TestHeaders:
    """Tests for header normalization and field names."""

    def test_field_names_are_sanitized(self):
        """Test that headers become camelCase identifiers."""
        schema = build("Max HP,item_name,class\n1,a,b\n")

        assert [c.field_name for c in schema.columns] == ["maxHP", "itemName", "class_"]
        assert [c.original_header for c in schema.columns] == ["Max HP", "item_name", "class"]

    def test_raw_field_names(self):
        """Test that sanitizing can be turned off."""
        schema = build("Max HP\n1\n", sanitize_field_names=False)

        assert schema.columns[0].field_name == "Max HP"

    def test_blank_header_gets_placeholder(self):
        """Test blank header replacement."""
        schema = build("Id,,Name\n1,2,3\n", sanitize_field_names=False)

        assert [c.field_name for c in schema.columns] == ["Id", "column_1", "Name"]
        assert any("Empty header at column 1" in w.message for w in schema.warnings)

    def test_duplicate_headers_are_renamed(self):
        """Test duplicate header suffixes."""
        schema = build("Name,Name,Name\na,b,c\n", sanitize_field_names=False)

        assert [c.field_name for c in schema.columns] == ["Name", "Name_2", "Name_3"]
        assert sum("Duplicate header" in w.message for w in schema.warnings) == 2

    def test_header_whitespace_is_kept(self):
        """Test that padded and bare headers are not duplicates of each other."""
        schema = build(" a ,a\n1,2\n")

        assert [c.original_header for c in schema.columns] == [" a ", "a"]
        assert [c.field_name for c in schema.columns] == ["a", "a_2"]
        assert not any("Duplicate header" in w.message for w in schema.warnings)
        assert any("sanitizes to existing field" in w.message for w in schema.warnings)

    def test_headers_that_sanitize_alike_stay_unique(self):
        """Test that distinct headers never share a field name."""
        schema = build("Max HP,MaxHP\n1,2\n")

        names = [c.field_name for c in schema.columns]
        assert len(set(names)) == 2

    def test_no_header_row(self):
        """Test that an empty table yields no columns and a warning."""
        schema = build("# nothing\n")

        assert schema.columns == []
        assert schema.rows == []
        assert schema.warnings[0].level == WarningLevel.WARNING


class TestTypes:
    """Tests for type hints and inference."""

    def test_hints_win_over_values(self):
        """Test that a type hint is used even if values disagree."""
        schema = build("Id,Score\nstring,double\n1,2\n", header_rows=2)

        assert schema.columns[0].resolved_type == ResolvedType.STRING
        assert schema.columns[1].resolved_type == ResolvedType.DOUBLE

    def test_blank_hint_infers(self):
        """Test that a blank hint falls back to inference."""
        schema = build("Id,Score\nstring,\n1,2.5\n", header_rows=2)

        assert schema.columns[1].resolved_type == ResolvedType.FLOAT

    def test_unknown_hint_defaults_to_string(self):
        """Test that an unrecognized hint warns and uses string."""
        schema = build("Id\nInteger\n1\n", header_rows=2)

        assert schema.columns[0].resolved_type == ResolvedType.STRING
        assert any("Unrecognized type hint 'Integer'" in w.message for w in schema.warnings)

    def test_inference_without_hints(self):
        """Test single-row layouts infer every column."""
        schema = build("A,B,C,D\n1,1.5,true,x\n2,2,false,y\n")

        assert [c.resolved_type for c in schema.columns] == [
            ResolvedType.INT,
            ResolvedType.FLOAT,
            ResolvedType.BOOL,
            ResolvedType.STRING,
        ]


class TestFlags:
    """Tests for the flags row."""

    def test_boolean_flags(self):
        """Test that bare keywords set column markers."""
        schema = build("Id,Name,Notes\nint,string,string\nkey,name|optional,skip|list\n1,a,b\n", 3)
        id_col, name_col, notes_col = schema.columns

        assert id_col.is_key
        assert name_col.is_name and name_col.is_optional
        assert notes_col.is_skipped and notes_col.is_list
        assert schema.key_column is id_col

    def test_flags_are_case_insensitive(self):
        """Test upper-case flag keywords."""
        schema = build("Id\nint\nKEY\n1\n", 3)

        assert schema.columns[0].is_key

    def test_attribute_flags(self):
        """Test hide and parametrized flags."""
        schema = build(
            "Hp\nint\nhide|range(0; 100)|tooltip(Hit points)|header(Stats)|multiline(3)\n1\n", 3
        )

        assert schema.columns[0].attributes == {
            "hide": "",
            "range": "0,100",
            "tooltip": "Hit points",
            "header": "Stats",
            "multiline": "3",
        }

    def test_malformed_range_is_ignored(self):
        """Test that a range without two bounds is dropped."""
        schema = build("Hp\nint\nrange(5)\n1\n", 3)

        assert "range" not in schema.columns[0].attributes

    def test_unknown_flags_are_ignored_silently(self):
        """Test that unrecognized tokens set nothing and do not warn."""
        schema = build("Hp\nint\nbogus|key\n1\n", 3)

        assert schema.columns[0].is_key
        assert schema.columns[0].attributes == {}
        assert schema.warnings == []

    def test_enum_values_from_flags_row(self):
        """Test that enum literals run to the end of the flags row."""
        schema = build("Id,Element\nint,enum\nkey,Fire,Water,,Earth\n1,Fire\n", 3)
        element = schema.columns[1]

        assert element.resolved_type == ResolvedType.ENUM
        assert element.enum_values == ["Fire", "Water", "Earth"]
        assert element.attributes == {}

    def test_enum_without_values_warns(self):
        """Test an enum column whose flags cell is blank."""
        schema = build("Id,Element\nint,enum\nkey,\n1,Fire\n", 3)

        assert schema.columns[1].enum_values == []
        assert any("no values" in w.message for w in schema.warnings)

    def test_non_enum_columns_have_no_enum_values(self):
        """Test the enum_values invariant on other types."""
        schema = build("Id\nint\nkey\n1\n", 3)

        assert schema.columns[0].enum_values is None


class TestRows:
    """Tests for per-row field maps."""

    def test_rows_are_keyed_by_field_name(self):
        """Test that every row has one entry per column."""
        schema = build("Max HP,Name\n10,Orc\n20\n")

        assert schema.rows == [
            {"maxHP": "10", "name": "Orc"},
            {"maxHP": "20", "name": ""},
        ]

    def test_no_data_rows_is_info(self):
        """Test the empty-table notice."""
        schema = build("Id\n")

        assert schema.rows == []
        assert [w.level for w in schema.warnings] == [WarningLevel.INFO]
