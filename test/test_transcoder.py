"""
Tests for the complex field transcoder

Tests conversion of submitted input into the stored nested shape, flattening
of stored structures into storage rows, and the serialization helpers.
"""

from cms_fields.fields.transcoder import (
    StorageRow,
    decode,
    encode,
    maybe_unserialize,
    serialize_value,
    strip_slashes_deep,
)


class TestEncode:
    """Test conversion of submitted input into the stored shape"""

    def test_encode_renames_group_and_strips_marker(self):
        """The group key becomes _type and field keys lose their marker"""
        data = [
            {"group": "text", "_title": "Hello"},
            {"group": "image", "_src": "a.jpg", "_caption": "Alt"},
        ]
        assert encode(data) == [
            {"_type": "text", "title": "Hello"},
            {"_type": "image", "src": "a.jpg", "caption": "Alt"},
        ]

    def test_encode_keeps_unmarked_keys(self):
        assert encode([{"group": "text", "title": "Hi"}]) == [{"_type": "text", "title": "Hi"}]

    def test_encode_strips_one_marker_only(self):
        assert encode([{"group": "text", "__title": "Hi"}]) == [{"_type": "text", "_title": "Hi"}]

    def test_encode_nested_records(self):
        """Nested repeater values are encoded recursively"""
        data = [
            {
                "group": "section",
                "_heading": "Intro",
                "_slides": [
                    {"group": "slide", "_title": "One"},
                    {"group": "slide", "_title": "Two"},
                ],
            }
        ]
        assert encode(data) == [
            {
                "_type": "section",
                "heading": "Intro",
                "slides": [
                    {"_type": "slide", "title": "One"},
                    {"_type": "slide", "title": "Two"},
                ],
            }
        ]

    def test_encode_passes_through_non_records(self):
        """Items without a group key are kept unchanged"""
        data = [{"foo": "bar"}, "plain", {"group": "text", "_title": "x"}]
        assert encode(data) == [{"foo": "bar"}, "plain", {"_type": "text", "title": "x"}]

    def test_encode_mapping_input(self):
        data = {"0": {"group": "text", "_title": "a"}, "1": {"group": "text", "_title": "b"}}
        assert encode(data) == {"0": {"_type": "text", "title": "a"}, "1": {"_type": "text", "title": "b"}}

    def test_encode_does_not_mutate_input(self):
        data = [{"group": "text", "_title": "Hello"}]
        encode(data)
        assert data == [{"group": "text", "_title": "Hello"}]

    def test_encode_empty(self):
        assert encode([]) == []
        assert encode(None) is None


class TestDecode:
    """Test flattening of stored structures into storage rows"""

    def test_decode_flat_records(self):
        """Each field of each record becomes one row keyed by the storage grammar"""
        data = [
            {"_type": "text", "title": "Hello"},
            {"_type": "image", "src": "a.jpg", "caption": "Alt"},
        ]
        assert decode(data, "gallery") == [
            StorageRow("gallery_text-_title_0", "Hello"),
            StorageRow("gallery_image-_src_1", "a.jpg"),
            StorageRow("gallery_image-_caption_1", "Alt"),
        ]

    def test_decode_nested_records(self):
        """Nested record lists are decoded under the key of the field holding them"""
        data = [
            {
                "_type": "section",
                "heading": "H",
                "slides": [{"_type": "slide", "title": "One"}, {"_type": "slide", "title": "Two"}],
            }
        ]
        assert decode(data, "page") == [
            StorageRow("page_section-_heading_0", "H"),
            StorageRow("page_section-_slides_0_slide-_title_0", "One"),
            StorageRow("page_section-_slides_0_slide-_title_1", "Two"),
        ]

    def test_decode_three_levels(self):
        data = [
            {
                "_type": "section",
                "slides": [
                    {"_type": "slide", "bullets": [{"_type": "bullet", "text": "a"}]},
                ],
            }
        ]
        assert decode(data, "page") == [
            StorageRow("page_section-_slides_0_slide-_bullets_0_bullet-_text_0", "a"),
        ]

    def test_decode_serializes_plain_structures(self):
        """Lists and mappings that are not record lists are stored serialized"""
        data = [{"_type": "post", "tags": ["a", "b"], "location": {"lat": "1"}}]
        rows = decode(data, "posts")
        assert rows == [
            StorageRow("posts_post-_tags_0", '["a","b"]'),
            StorageRow("posts_post-_location_0", '{"lat":"1"}'),
        ]

    def test_decode_stringifies_scalars(self):
        data = [{"_type": "t", "count": 3, "enabled": True, "disabled": False}]
        assert decode(data, "p") == [
            StorageRow("p_t-_count_0", "3"),
            StorageRow("p_t-_enabled_0", "1"),
            StorageRow("p_t-_disabled_0", ""),
        ]

    def test_decode_skips_invalid_items(self):
        """Items without _type and null values produce no rows but keep their position"""
        data = [{"title": "x"}, "junk", {"_type": "t", "title": None, "n": 3}]
        assert decode(data, "p") == [StorageRow("p_t-_n_2", "3")]

    def test_decode_mapping_input(self):
        data = {"a": {"_type": "t", "title": "x"}, "b": {"_type": "t", "title": "y"}}
        assert decode(data, "p") == [StorageRow("p_t-_title_0", "x"), StorageRow("p_t-_title_1", "y")]

    def test_decode_empty(self):
        assert decode([], "p") == []
        assert decode(None, "p") == []


class TestSerialization:
    """Test the serialization helpers"""

    def test_serialize_value_is_compact(self):
        assert serialize_value([{"_type": "text", "title": "Hé"}]) == '[{"_type":"text","title":"Hé"}]'

    def test_maybe_unserialize_structures(self):
        assert maybe_unserialize('["a"]') == ["a"]
        assert maybe_unserialize('{"lat":"1"}') == {"lat": "1"}

    def test_maybe_unserialize_leaves_plain_text(self):
        assert maybe_unserialize("plain") == "plain"
        assert maybe_unserialize("[not json") == "[not json"
        assert maybe_unserialize("") == ""

    def test_maybe_unserialize_leaves_non_strings(self):
        assert maybe_unserialize(5) == 5
        assert maybe_unserialize(None) is None
        assert maybe_unserialize(["a"]) == ["a"]

    def test_strip_slashes_deep(self):
        """Backslash escaping is removed from every nested string"""
        data = {"a": ["O\\'Reilly", 3], "b": {"c": "C:\\\\path"}}
        assert strip_slashes_deep(data) == {"a": ["O'Reilly", 3], "b": {"c": "C:\\path"}}

    def test_strip_slashes_deep_edge_cases(self):
        """An escaped newline keeps the newline and a trailing backslash is dropped"""
        assert strip_slashes_deep("line\\\nnext") == "line\nnext"
        assert strip_slashes_deep("end\\") == "end"
        assert strip_slashes_deep("\\\\") == "\\"
