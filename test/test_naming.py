"""
Tests for field name normalization
"""

from cms_fields.utils.naming import humanize_name, normalize_name


class TestNormalizeName:
    """Test conversion of user supplied names into storage names"""

    def test_normalize_lowercases_and_joins_words(self):
        assert normalize_name("Hero Image") == "hero_image"

    def test_normalize_keeps_underscores_and_digits(self):
        assert normalize_name("slide_2") == "slide_2"

    def test_normalize_transliterates_accents(self):
        """Accented characters are transliterated to ASCII"""
        assert normalize_name("Café Menü") == "cafe_menu"

    def test_normalize_replaces_punctuation(self):
        assert normalize_name("price: $99") == "price_99"

    def test_normalize_empty(self):
        assert normalize_name("") == ""
        assert normalize_name(None) == ""


class TestHumanizeName:
    def test_humanize_name(self):
        assert humanize_name("hero_image") == "Hero Image"
