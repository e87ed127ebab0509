"""Tests for the YML feed parser."""

import pytest

from catalog_import.exceptions import FeedParseError
from catalog_import.feed.parser import (
    TEXT_KEY,
    element_to_dict,
    extract_feed,
    parse_document,
    parse_feed,
    sanitize_xml,
)


def _wrap_offers(offers_xml: str, categories_xml: str = "") -> str:
    return (
        "<yml_catalog><shop>"
        f"<categories>{categories_xml}</categories>"
        f"<offers>{offers_xml}</offers>"
        "</shop></yml_catalog>"
    )


class TestSanitizeXml:
    def test_bare_ampersand_is_escaped(self):
        assert sanitize_xml("Tom & Jerry") == "Tom &amp; Jerry"

    @pytest.mark.parametrize("entity", ["&amp;", "&lt;", "&gt;", "&quot;", "&apos;", "&#38;", "&#x26;", "&#xA0;"])
    def test_valid_entities_are_kept(self, entity):
        assert sanitize_xml(f"a {entity} b") == f"a {entity} b"

    def test_unknown_named_entity_is_escaped(self):
        # &nbsp; is not an XML entity and would abort parsing
        assert sanitize_xml("a&nbsp;b") == "a&amp;nbsp;b"


class TestParseDocument:
    def test_attributes_and_text_do_not_collide(self):
        document = parse_document('<category id="5" parentId="1">Креми</category>')
        assert document == {"category": {"@id": "5", "@parentId": "1", TEXT_KEY: "Креми"}}

    def test_repeatable_tags_are_always_lists(self):
        document = parse_document(_wrap_offers(
            '<offer id="1"><name>A</name><picture>p.jpg</picture><param name="Цвет">Червоний</param></offer>',
            '<category id="1">Root</category>',
        ))
        shop = document["yml_catalog"]["shop"]
        assert isinstance(shop["categories"]["category"], list)
        offers = shop["offers"]["offer"]
        assert isinstance(offers, list) and len(offers) == 1
        assert offers[0]["picture"] == ["p.jpg"]
        assert offers[0]["param"] == [{"@name": "Цвет", TEXT_KEY: "Червоний"}]

    def test_other_repeated_tags_become_lists(self):
        document = parse_document("<root><tag>a</tag><tag>b</tag><single>c</single></root>")
        assert document["root"] == {"tag": ["a", "b"], "single": "c"}

    def test_empty_element_is_none(self):
        assert parse_document("<root><empty/></root>") == {"root": {"empty": None}}

    def test_malformed_document_raises_feed_parse_error(self):
        with pytest.raises(FeedParseError) as exc_info:
            parse_document("<yml_catalog>\n<shop>\n</yml_catalog>")
        assert "mismatched tag" in str(exc_info.value)
        assert "\n" not in str(exc_info.value)
        assert exc_info.value.line == 3

    def test_bare_ampersand_parses_and_is_preserved(self):
        document = parse_document("<root><name>Крем & Co</name></root>")
        assert document["root"]["name"] == "Крем & Co"


class TestParseFeed:
    def test_sample_feed(self, sample_feed_text):
        feed = parse_feed(sample_feed_text)

        assert feed.shop_name == "Svitanok"
        assert [c.external_id for c in feed.categories] == ["12", "10", "20"]
        child = feed.categories[0]
        assert child.name == "Креми для обличчя"
        assert child.parent_external_id == "10"
        assert feed.categories[1].is_root()

        assert [o.external_id for o in feed.offers] == ["1001", "1002", "1003"]
        first = feed.offers[0]
        assert first.name == "Крем для обличчя зволожуючий"
        assert first.price == "450.00"
        assert first.old_price == "520"
        assert first.available == "true"
        assert first.vendor == "Nivea"
        assert first.vendor_code == "NV-1001"
        assert first.category_external_id == "12"
        assert first.country_of_origin == "Германия"
        assert first.pictures == [
            "https://cdn.example.com/1001-1.jpg",
            "https://cdn.example.com/1001-2.jpg",
        ]
        assert {"@name": "Объем", "@unit": "мл", TEXT_KEY: "50"} in first.params

    def test_model_is_used_when_name_missing(self, sample_feed_text):
        offer = parse_feed(sample_feed_text).offers[1]
        assert offer.name is None
        assert offer.display_name == "Лосьйон для тіла"

    def test_offer_without_optional_fields(self, sample_feed_text):
        offer = parse_feed(sample_feed_text).offers[2]
        assert offer.available is None
        assert offer.pictures == []
        assert offer.params == []

    def test_single_offer_and_category(self):
        feed = parse_feed(_wrap_offers(
            '<offer id="7"><name>Тонер</name><price>10</price><picture>one.jpg</picture></offer>',
            '<category id="3">Тонери</category>',
        ))
        assert len(feed.categories) == 1
        assert len(feed.offers) == 1
        assert feed.offers[0].pictures == ["one.jpg"]

    def test_entries_without_id_are_skipped(self):
        feed = parse_feed(_wrap_offers(
            '<offer><name>No id</name></offer><offer id="2"><name>Ok</name></offer>',
            '<category>Без id</category><category id="1">З id</category>',
        ))
        assert [c.external_id for c in feed.categories] == ["1"]
        assert [o.external_id for o in feed.offers] == ["2"]

    def test_feed_with_ampersand_in_text(self):
        feed = parse_feed(_wrap_offers('<offer id="1"><name>Dolce & Gabbana</name><vendor>D&G</vendor></offer>'))
        assert feed.offers[0].name == "Dolce & Gabbana"
        assert feed.offers[0].vendor == "D&G"

    def test_missing_sections_give_empty_lists(self):
        feed = parse_feed("<yml_catalog><shop><name>Empty</name></shop></yml_catalog>")
        assert feed.categories == []
        assert feed.offers == []

    def test_document_without_shop_wrapper(self):
        feed = extract_feed({
            "catalog": {
                "categories": {"category": {"@id": "1", TEXT_KEY: "Root"}},
                "offers": {"offer": {"@id": "5", "name": "Solo"}},
            }
        })
        assert [c.name for c in feed.categories] == ["Root"]
        assert [o.name for o in feed.offers] == ["Solo"]

    def test_text_around_inline_markup_reaches_offer_name(self):
        feed = parse_feed(_wrap_offers('<offer id="1"><name>Крем <b>X</b> 50мл</name></offer>'))
        assert feed.offers[0].name == "Крем 50мл"

    def test_element_to_dict_skips_comments(self):
        import xml.etree.ElementTree as ET

        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        root = ET.fromstring("<root><!-- note --><a>1</a></root>", parser=parser)
        assert element_to_dict(root) == {"a": "1"}

    def test_text_after_inline_child_is_kept(self):
        document = parse_document("<root><name>Крем <b>X</b> 50мл</name></root>")
        name = document["root"]["name"]
        assert name == {"b": "X", TEXT_KEY: "Крем 50мл"}
