from app.utils import slugify, unique_slug


def test_slugify_collapses_separators():
    assert slugify("  Beach Day!  ") == "beach-day"
    assert slugify("Año Nuevo / 2026") == "a-o-nuevo-2026"
    assert slugify("---") == ""

def test_unique_slug_appends_numeric_suffix():
    assert unique_slug("Beach Day", []) == "beach-day"
    assert unique_slug("Beach Day", ["beach-day"]) == "beach-day-1"
    assert unique_slug("Beach Day", ["beach-day", "beach-day-1"]) == "beach-day-2"

def test_unique_slug_fallback_for_empty_titles():
    assert unique_slug("!!!", []) == "album"
    assert unique_slug("???", ["album"]) == "album-1"
