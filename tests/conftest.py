import pytest

from cssquery import parse_xml
from cssquery.node import document, element

COLLECTION_XML = """<?xml version="1.0"?>
<collection>
  <cd class="a">
    <title>T1</title>
  </cd>
  <cd>
    <title>T2</title>
  </cd>
</collection>
"""


@pytest.fixture
def collection():
    """The two-cd collection document, loaded from XML."""
    return parse_xml(COLLECTION_XML)


@pytest.fixture
def catalog():
    """A hand-built tree with ids, attributes and siblings."""
    return document(
        element(
            "catalog",
            {"id": "root"},
            element(
                "cd",
                {"id": "first", "class": "featured rock", "lang": "en-US"},
                element("title", {"lang": "en"}, "Fight for your mind"),
                element("artist", None, "Ben Harper"),
                element("year", None, "1995"),
            ),
            element(
                "cd",
                {"id": "second", "class": "rock"},
                element("title", {"lang": "en-GB"}, "Electric Ladyland"),
                element("artist", None, "Jimi Hendrix"),
                element("year", None, "1997"),
            ),
            element(
                "ul",
                None,
                element("li", {"class": "x"}, "one"),
                element("li", None, "two"),
                element("li", None, "three"),
            ),
        )
    )
