"""Tests for the reference tree, XML loading and serialization."""

import pytest

from cssquery import Node, TextNode, XMLLoadError, parse_xml, to_xml
from cssquery.node import document, element


class TestLoader:
    def test_document_structure(self, collection):
        assert collection.name == "#document"
        (root,) = collection.element_children
        assert root.name == "collection"
        assert root.parent is collection
        assert [cd.name for cd in root.element_children] == ["cd", "cd"]

    def test_text_and_attributes(self, collection):
        first_cd = collection.element_children[0].element_children[0]
        assert first_cd.attrs == {"class": "a"}
        assert first_cd.element_children[0].text == "T1"

    def test_namespaces_split_from_names(self):
        doc = parse_xml('<root xmlns:x="urn:x"><x:item x:kind="a" plain="b"/></root>')
        (item,) = doc.element_children[0].element_children
        assert item.name == "item"
        assert item.namespace == "urn:x"
        assert item.attrs == {"{urn:x}kind": "a", "plain": "b"}

    def test_namespaced_attribute_kept_apart(self):
        doc = parse_xml('<r xmlns:x="urn:x"><item x:href="ns" href="plain"/></r>')
        (item,) = doc.element_children[0].element_children
        assert item.attrs == {"{urn:x}href": "ns", "href": "plain"}

    def test_namespaced_attribute_not_matched_by_local_name(self):
        doc = parse_xml('<r xmlns:x="urn:x"><a x:href="ns"/><b href="plain"/></r>')
        assert [node.name for node in doc.query("[href]")] == ["b"]

    def test_tail_text_kept(self):
        doc = parse_xml("<p>a<b>b</b>c</p>")
        assert doc.element_children[0].to_text(separator="") == "abc"

    def test_malformed_xml(self):
        with pytest.raises(XMLLoadError):
            parse_xml("<a><b></a>")


class TestNode:
    def test_append_and_remove(self):
        parent = Node("list")
        child = parent.append_child(Node("item"))
        assert child.parent is parent
        assert parent.has_child_nodes()
        parent.remove_child(child)
        assert child.parent is None
        assert not parent.has_child_nodes()
        with pytest.raises(ValueError):
            parent.remove_child(child)

    def test_iter_descendants(self, catalog):
        titles = list(catalog.iter_descendants("title"))
        assert [t.text for t in titles] == ["Fight for your mind", "Electric Ladyland"]
        assert len(list(catalog.iter_descendants())) == 13

    def test_query(self, catalog):
        assert [cd.attrs["id"] for cd in catalog.query("cd")] == ["first", "second"]

    def test_to_text(self):
        node = element("p", None, "  a ", element("b", None, " b "), "")
        assert node.to_text() == "a b"
        assert node.to_text(separator="|", strip=False) == "  a | b "

    def test_text_node(self):
        text = TextNode("  hi ")
        assert text.text == "  hi "
        assert text.to_text() == "hi"
        assert text.children == []
        assert not text.has_child_nodes()


class TestSerialize:
    def test_escaping(self):
        node = element("a", {"href": 'x"y&z'}, "1 < 2")
        assert node.to_xml() == '<a href="x&quot;y&amp;z">1 &lt; 2</a>'

    def test_empty_element(self):
        assert to_xml(element("br")) == "<br/>"

    def test_pretty_nesting(self):
        node = element("cd", None, "\n  ", element("title", None, "T1"), "\n")
        assert node.to_xml() == "<cd>\n  <title>T1</title>\n</cd>"

    def test_compact(self):
        node = element("cd", None, element("title", None, " T1 "))
        assert node.to_xml(pretty=False) == "<cd><title> T1 </title></cd>"

    def test_document(self):
        assert to_xml(document(element("a"))) == "<a/>"

    def test_namespace_declared_once(self):
        doc = parse_xml('<r xmlns="urn:r"><c/></r>')
        assert to_xml(doc, pretty=False) == '<r xmlns="urn:r"><c/></r>'

    def test_default_namespace_undeclared(self):
        doc = parse_xml('<r xmlns="urn:r"><c xmlns=""/></r>')
        assert to_xml(doc, pretty=False) == '<r xmlns="urn:r"><c xmlns=""/></r>'

    def test_namespaced_attributes_prefixed(self):
        doc = parse_xml(
            '<r xmlns:x="urn:x" xmlns:y="urn:y"><item x:href="ns" href="plain" y:a="1" x:b="2" xml:lang="en"/></r>'
        )
        item = doc.element_children[0].element_children[0]
        assert item.to_xml() == (
            '<item xmlns:ns0="urn:x" ns0:href="ns" href="plain" xmlns:ns1="urn:y" ns1:a="1" ns0:b="2" xml:lang="en"/>'
        )
        assert parse_xml(item.to_xml()).element_children[0].attrs == item.attrs
