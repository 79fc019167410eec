"""Tests for the definitions loader."""

import pytest

from wireshape.core.exceptions import DefinitionError
from wireshape.formats import list_format_kinds
from wireshape.models.loader import load_definitions


@pytest.fixture
def definitions_dir(temp_dir):
    """Directory for definition files."""
    return temp_dir


class TestDefinitionsLoader:
    """Tests for definitions loading functionality."""

    def test_load_simple_definitions(self, definitions_dir):
        """Test loading definitions from YAML."""
        definitions_file = definitions_dir / "simple.yaml"
        definitions_file.write_text(
            """
name: shop
transformers:
  product:
    fields:
      id:
      name: title
      price: {format: number, params: {places: 2}}
    minimal: [id]
"""
        )
        catalog = load_definitions(str(definitions_file))
        assert catalog.name == "shop"
        assert catalog.names() == ["product"]
        assert catalog.create("product").build_spec().keys() == ["id", "name", "price"]

    def test_file_not_found(self):
        """Test error when the definitions file doesn't exist."""
        with pytest.raises(DefinitionError) as exc_info:
            load_definitions("nonexistent.yaml")
        assert "not found" in str(exc_info.value).lower()

    def test_invalid_yaml(self, definitions_dir):
        """Test error when YAML is invalid."""
        definitions_file = definitions_dir / "invalid.yaml"
        definitions_file.write_text("invalid: yaml: content: [unclosed")

        with pytest.raises(DefinitionError) as exc_info:
            load_definitions(str(definitions_file))
        assert "Invalid YAML" in str(exc_info.value)

    def test_not_a_dictionary(self, definitions_dir):
        """Test error when the document is not a mapping."""
        definitions_file = definitions_dir / "list.yaml"
        definitions_file.write_text("- product\n- order\n")

        with pytest.raises(DefinitionError) as exc_info:
            load_definitions(str(definitions_file))
        assert "YAML dictionary" in str(exc_info.value)

    def test_validation_error(self, definitions_dir):
        """Test that schema errors are reported as DefinitionError."""
        definitions_file = definitions_dir / "bad.yaml"
        definitions_file.write_text(
            """
transformers:
  product:
    fields:
      price: {map: {a: 1}, format: number}
"""
        )
        with pytest.raises(DefinitionError) as exc_info:
            load_definitions(str(definitions_file))
        assert "Definitions validation failed" in str(exc_info.value)

    def test_cycle_detection(self, definitions_dir):
        """Test that reference cycles are detected at load time."""
        definitions_file = definitions_dir / "cycle.yaml"
        definitions_file.write_text(
            """
transformers:
  order:
    fields:
      lines: {transformer: line}
  line:
    fields:
      order: {transformer: order}
"""
        )
        with pytest.raises(DefinitionError) as exc_info:
            load_definitions(str(definitions_file))
        assert "Cycle detected" in str(exc_info.value)

    def test_invalid_structure(self, definitions_dir):
        """Test that spec errors surface as DefinitionError at load time."""
        definitions_file = definitions_dir / "structure.yaml"
        definitions_file.write_text(
            """
transformers:
  product:
    fields:
      id:
    order_by: [id, sideways]
"""
        )
        with pytest.raises(DefinitionError) as exc_info:
            load_definitions(str(definitions_file))
        assert "Invalid transformer structure" in str(exc_info.value)

    def test_template_rendering_in_loader(self, definitions_dir, monkeypatch):
        """Test that templates are rendered before validation."""
        monkeypatch.setenv("DATE_PATTERN", "%d.%m.%Y")
        definitions_file = definitions_dir / "templated.yaml"
        definitions_file.write_text(
            """
name: shop
transformers:
  product:
    description: "Products of {{ definitions.name }}"
    fields:
      added: {format: date, params: {format: "{{ env_var('DATE_PATTERN') }}"}}
"""
        )
        catalog = load_definitions(str(definitions_file))
        assert catalog.get_definition("product").description == "Products of shop"
        assert catalog.create("product").build_spec().get("added").apply("2024-03-01") == "01.03.2024"

    def test_cli_vars_in_loader(self, definitions_dir, cli_vars):
        """Test that CLI variables drive conditional fields."""
        definitions_file = definitions_dir / "vars.yaml"
        definitions_file.write_text(
            """
transformers:
  user:
    fields:
      id:
      email: {when: "{{ var('show_emails') }}"}
      joined: {format: date, params: {format: "{{ var('date_pattern') }}"}}
"""
        )
        catalog = load_definitions(str(definitions_file), cli_vars)
        assert catalog.create("user").build_spec().keys() == ["id", "email", "joined"]

        catalog = load_definitions(str(definitions_file), {**cli_vars, "show_emails": "false"})
        assert catalog.create("user").build_spec().keys() == ["id", "joined"]

    def test_missing_cli_var(self, definitions_dir):
        """Test that a missing CLI variable raises DefinitionError."""
        definitions_file = definitions_dir / "vars.yaml"
        definitions_file.write_text(
            """
transformers:
  user:
    fields:
      email: {when: "{{ var('show_emails') }}"}
"""
        )
        with pytest.raises(DefinitionError) as exc_info:
            load_definitions(str(definitions_file))
        assert "show_emails" in str(exc_info.value)

    @pytest.mark.usefixtures("reset_formats")
    def test_custom_formats_relative_to_file(self, definitions_dir):
        """Test that custom format files resolve against the definitions directory."""
        (definitions_dir / "shop_formats.py").write_text(
            "from wireshape.formats import register_format\n"
            "\n"
            "@register_format('cents')\n"
            "def create_cents_formatter(params):\n"
            "    return lambda value: int(round(float(value) * 100))\n"
        )
        definitions_file = definitions_dir / "shop.yaml"
        definitions_file.write_text(
            """
formats: [shop_formats.py]
transformers:
  product:
    fields:
      price: {format: cents}
"""
        )
        catalog = load_definitions(str(definitions_file))
        assert "cents" in list_format_kinds()
        assert catalog.create("product").build_spec().get("price").apply("1.25") == 125
