"""
YML catalog feed parser.

Turns the raw document into a generic nested structure (dicts, lists and
strings) and then, through a single adapter, into RawCategory / RawOffer
records. All guessing about the feed's shape happens here.
"""
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, FrozenSet, List, Optional

from catalog_import.exceptions import FeedParseError
from catalog_import.feed.items import ParsedFeed, RawCategory, RawOffer

logger = logging.getLogger(__name__)

ATTR_PREFIX = "@"
TEXT_KEY = "#text"

# Tags that always come back as a list, even when a feed has one of them
REPEATABLE_TAGS: FrozenSet[str] = frozenset({"offer", "category", "param", "picture", "currency"})

# '&' not starting a predefined entity or a numeric character reference
_BARE_AMPERSAND = re.compile(r'&(?!(?:amp|lt|gt|quot|apos);|#[0-9]+;|#x[0-9a-fA-F]+;)')


def sanitize_xml(content: str) -> str:
    """Escape stray ampersands that would otherwise abort parsing."""
    return _BARE_AMPERSAND.sub("&amp;", content)


def element_to_dict(element: ET.Element, force_list: FrozenSet[str] = REPEATABLE_TAGS) -> Any:
    """
    Convert an element into plain Python data.

    Attributes are stored under "@name" keys, child elements under their tag.
    Text of an element that also has attributes or children goes under "#text";
    a bare element becomes its stripped text (or None when empty).
    """
    result: Dict[str, Any] = {}
    for name, value in element.attrib.items():
        result[f"{ATTR_PREFIX}{name}"] = value

    for child in element:
        if not isinstance(child.tag, str):
            # comments and processing instructions
            continue
        value = element_to_dict(child, force_list)
        if child.tag in result:
            existing = result[child.tag]
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[child.tag] = [existing, value]
        elif child.tag in force_list:
            result[child.tag] = [value]
        else:
            result[child.tag] = value

    # Own text plus the text following each child, e.g. "a <b>x</b> c" -> "a c"
    pieces = [element.text] + [child.tail for child in element]
    text = " ".join(piece.strip() for piece in pieces if piece and piece.strip())
    if not result:
        return text or None
    if text:
        result[TEXT_KEY] = text
    return result


def parse_document(content: str) -> Dict[str, Any]:
    """
    Parse raw feed text into a generic nested structure keyed by the root tag.

    Raises:
        FeedParseError: If the document is not well-formed after sanitization
    """
    try:
        root = ET.fromstring(sanitize_xml(content))
    except ET.ParseError as e:
        line, column = getattr(e, "position", (None, None))
        message = str(e).splitlines()[0] if str(e) else "Unknown error"
        raise FeedParseError(message, line=line, column=column) from e

    return {root.tag: element_to_dict(root)}


def parse_feed(content: str) -> ParsedFeed:
    """Parse feed text straight into categories and offers."""
    return extract_feed(parse_document(content))


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _text(value: Any) -> Optional[str]:
    """Text content of a converted element, whatever shape it took."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get(TEXT_KEY)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _field(node: Dict[str, Any], name: str) -> Optional[str]:
    """Child element text, or the attribute of the same name."""
    value = _text(node.get(name))
    if value is None:
        value = _text(node.get(f"{ATTR_PREFIX}{name}"))
    return value


def extract_feed(document: Dict[str, Any]) -> ParsedFeed:
    """
    Adapter from the generic structure to feed records.

    Accepts yml_catalog > shop > {categories, offers}, as well as a document
    whose root (or shop) holds the categories/offers directly.

    Returns:
        ParsedFeed with categories and offers in document order
    """
    root = _as_dict(document.get("yml_catalog")) or _as_dict(next(iter(document.values()), None))
    shop = _as_dict(root.get("shop")) or root

    categories = [
        category
        for category in (_build_category(node) for node in _as_list(_as_dict(shop.get("categories")).get("category")))
        if category is not None
    ]
    offers = [
        offer
        for offer in (_build_offer(node) for node in _as_list(_as_dict(shop.get("offers")).get("offer")))
        if offer is not None
    ]

    logger.info(f"Parsed feed: {len(categories)} categories, {len(offers)} offers")
    return ParsedFeed(categories=categories, offers=offers, shop_name=_text(shop.get("name")))


def _build_category(node: Any) -> Optional[RawCategory]:
    if not isinstance(node, dict):
        # <category>Name</category> without attributes has no id to key on
        logger.warning(f"Category without ID found, skipping: {node!r}")
        return None

    external_id = _text(node.get("@id"))
    if not external_id:
        logger.warning(f"Category without ID found, skipping: {_text(node)!r}")
        return None

    return RawCategory(
        external_id=external_id,
        name=_text(node) or "",
        parent_external_id=_text(node.get("@parentId")),
    )


def _build_offer(node: Any) -> Optional[RawOffer]:
    if not isinstance(node, dict):
        logger.warning("Offer without ID found, skipping")
        return None

    external_id = _text(node.get("@id"))
    if not external_id:
        logger.warning(f"Offer without ID found, skipping: {_field(node, 'name')!r}")
        return None

    return RawOffer(
        external_id=external_id,
        name=_field(node, "name"),
        model=_field(node, "model"),
        vendor=_field(node, "vendor"),
        vendor_code=_field(node, "vendorCode"),
        description=_field(node, "description"),
        price=_field(node, "price"),
        old_price=_field(node, "oldprice"),
        currency_id=_field(node, "currencyId"),
        available=_field(node, "available"),
        category_external_id=_field(node, "categoryId"),
        country_of_origin=_field(node, "country_of_origin"),
        pictures=[url for url in (_text(p) for p in _as_list(node.get("picture"))) if url],
        params=_as_list(node.get("param")),
    )
