"""
Tests for plain field types, field groups and the field type registry
"""

import pytest

from cms_fields.exceptions import ConfigurationError
from cms_fields.fields.base import Field
from cms_fields.fields.basic import MapField, SelectField, TextareaField, TextField
from cms_fields.fields.complex import ComplexField
from cms_fields.fields.group import GroupField
from cms_fields.fields.registry import FieldTypeRegistry, field_types, make_field


class TestFieldDefinition:
    """Test the field base class"""

    def test_name_is_normalized(self):
        field = TextField("Hero Title")
        assert field.name == "hero_title"
        assert field.base_name == "hero_title"
        assert field.label == "Hero Title"

    def test_explicit_label(self):
        assert TextField("subtitle", "Sub heading").label == "Sub heading"

    def test_invalid_name_raises(self):
        with pytest.raises(ConfigurationError):
            TextField("")

    def test_ids_are_unique(self):
        assert TextField("a").id != TextField("a").id

    def test_set_default_value_sets_value(self):
        field = TextField("title").set_default_value("Untitled")
        assert field.default_value == "Untitled"
        assert field.value == "Untitled"

    def test_builder_methods_chain(self):
        field = TextField("title").set_help_text("Shown on top").set_required()
        assert field.help_text == "Shown on top"
        assert field.required is True


class TestFieldSpawn:
    """Test spawning of live instances from a definition"""

    def test_spawn_returns_independent_instance(self):
        """Binding a value to an instance leaves the definition untouched"""
        template = TextField("title").set_default_value("Untitled")
        instance = template.spawn()
        instance.set_value("Hello")
        instance.rename("gallery_text-_title_0")

        assert template.value == "Untitled"
        assert template.name == "title"
        assert instance.base_name == "title"

    def test_spawn_copies_mutable_defaults(self):
        template = MapField("location")
        instance = template.spawn()
        instance.value["lat"] = "1"
        assert template.value["lat"] == ""
        assert template.default_value["lat"] == ""

    def test_spawn_resets_value_to_default(self):
        template = TextField("title").set_default_value("Untitled")
        template.set_value("dirty")
        assert template.spawn().value == "Untitled"


class TestFieldValue:
    """Test value binding"""

    def test_set_value_from_input(self):
        field = TextField("title")
        field.set_value_from_input({"title": "Hello", "other": "x"})
        assert field.get_value() == "Hello"

    def test_absent_input_keeps_value(self):
        field = TextField("title").set_default_value("Untitled")
        field.set_value_from_input({"other": "x"})
        assert field.value == "Untitled"

    def test_text_field_coerces_to_string(self):
        field = TextField("count")
        field.set_value(5)
        assert field.value == "5"

    def test_storage_items(self):
        field = Field("tags")
        field.set_value(["a", "b"])
        assert field.storage_items() == [("tags", '["a","b"]')]

        field.set_value(None)
        assert field.storage_items() == [("tags", "")]

    def test_set_value_from_storage_unserializes(self):
        field = Field("tags")
        field.set_value_from_storage({"tags": '["a","b"]'})
        assert field.value == ["a", "b"]

    def test_set_value_from_storage_absent_row(self):
        field = TextField("title").set_default_value("Untitled")
        field.set_value_from_storage({"title": None})
        assert field.value == "Untitled"

    def test_text_field_keeps_stored_text(self):
        """Text that looks like JSON is not parsed"""
        field = TextField("caption")
        field.set_value_from_storage({"caption": '["x"]'})
        assert field.value == '["x"]'

        field = TextareaField("body")
        field.set_value_from_storage({"body": '{"a": true}'})
        assert field.value == '{"a": true}'

    def test_persistence_requires_datastore(self):
        with pytest.raises(ConfigurationError):
            TextField("title").save()


class TestFieldToJson:
    def test_to_json(self):
        data = TextField("title").set_help_text("Help").to_json(False)
        assert data["type"] == "text"
        assert data["name"] == "title"
        assert data["base_name"] == "title"
        assert data["label"] == "Title"
        assert data["value"] == ""
        assert data["help_text"] == "Help"
        assert data["required"] is False

    def test_textarea_rows(self):
        field = TextareaField("body").set_rows(8)
        data = field.to_json(False)
        assert data["type"] == "textarea"
        assert data["rows"] == 8


class TestSelectField:
    """Test option sources of the select field"""

    def test_list_options(self):
        field = SelectField("color").add_options(["red", "blue"])
        assert field.options == [{"value": "red", "label": "red"}, {"value": "blue", "label": "blue"}]

    def test_mapping_options(self):
        field = SelectField("color").add_options({"r": "Red"})
        assert field.options == [{"value": "r", "label": "Red"}]

    def test_callable_options_resolved_on_read(self):
        """Callables are resolved every time the options are read"""
        source = ["a"]
        field = SelectField("letter").add_options(lambda: source)
        source.append("b")
        assert [option["value"] for option in field.options] == ["a", "b"]

    def test_options_accumulate(self):
        field = SelectField("color").add_options(["red"]).add_options({"b": "Blue"})
        assert len(field.options) == 2
        assert field.to_json(False)["options"][1] == {"value": "b", "label": "Blue"}


class TestMapField:
    """Test the compound map field"""

    def test_default_value(self):
        assert MapField("location").value == {"lat": "", "lng": "", "zoom": "", "address": ""}

    def test_set_position(self):
        field = MapField("location").set_position(1.5, 2.5, 10)
        assert field.value == {"lat": "1.5", "lng": "2.5", "zoom": "10", "address": ""}

    def test_partial_value_is_completed(self):
        field = MapField("location")
        field.set_value({"lat": 1, "address": "Main St"})
        assert field.value == {"lat": "1", "lng": "", "zoom": "", "address": "Main St"}

    def test_serialized_value(self):
        field = MapField("location")
        field.set_value('{"lat":"3"}')
        assert field.value["lat"] == "3"

    def test_storage_keys(self):
        """Each sub-key is stored as its own row"""
        field = MapField("location")
        field.set_value({"lat": "1", "lng": "2", "zoom": "3", "address": "x"})
        assert field.storage_items() == [
            ("location_lat", "1"),
            ("location_lng", "2"),
            ("location_zoom", "3"),
            ("location_address", "x"),
        ]

    def test_set_value_from_storage(self):
        field = MapField("location")
        field.set_value_from_storage({"location_lat": "1", "location_lng": "2"})
        assert field.value == {"lat": "1", "lng": "2", "zoom": "", "address": ""}

    def test_set_value_from_storage_nothing_stored(self):
        field = MapField("location").set_position(1, 2, 3)
        field.set_value_from_storage({})
        assert field.value["lat"] == "1"


class TestGroupField:
    """Test field groups"""

    def test_group_fields_in_order(self):
        group = GroupField("image", "Image", [TextField("src"), TextField("caption")])
        assert group.field_names() == ["src", "caption"]
        assert group.get_field("caption").name == "caption"
        assert group.get_field("missing") is None

    def test_group_default_label(self):
        assert GroupField("hero_image", None, []).label == "Hero Image"

    def test_duplicate_field_raises(self):
        with pytest.raises(ConfigurationError):
            GroupField("image", None, [TextField("src"), TextField("src")])

    def test_non_field_raises(self):
        with pytest.raises(ConfigurationError):
            GroupField("image", None, ["src"])

    def test_to_json(self):
        group = GroupField("image", "Image", [TextField("src")]).set_label_template("<%- src %>")
        data = group.to_json()
        assert data["name"] == "image"
        assert data["label_template"] == "<%- src %>"
        assert [field["name"] for field in data["fields"]] == ["src"]


class TestFieldTypeRegistry:
    """Test the field type registry"""

    def test_builtin_types_registered(self):
        assert set(field_types.all_types()) >= {"text", "textarea", "select", "map", "complex"}

    def test_make_field(self):
        field = make_field("text", "Title")
        assert isinstance(field, TextField)
        assert field.name == "title"

    def test_make_complex_field(self):
        assert isinstance(make_field("complex", "gallery", "Gallery"), ComplexField)

    def test_unknown_type_raises(self):
        with pytest.raises(ConfigurationError):
            make_field("rich_text", "body")

    def test_register_custom_type(self):
        class ColorField(TextField):
            type = "color"

        registry = FieldTypeRegistry()
        registry.register(ColorField)
        assert registry.is_registered("color")
        assert isinstance(registry.make("color", "accent"), ColorField)

    def test_register_non_field_raises(self):
        with pytest.raises(ConfigurationError):
            FieldTypeRegistry().register(dict)
