import logging
import math
import random
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from catalog_import.db.models import BrandData, CategoryData, ProductData, ROOT_LEVEL, CHILD_LEVEL
from catalog_import.db.repositories import BrandRepository, CategoryRepository, ProductRepository
from catalog_import.exceptions import RecordError
from catalog_import.feed.items import ParsedFeed, RawCategory, RawOffer
from catalog_import.normalization.attributes import normalize_attributes
from catalog_import.normalization.slug import suffixed_slug
from catalog_import.utils.sentry import add_breadcrumb, capture_error

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 50
BRAND_SLUG_SUFFIX_MAX = 999

# Includes the non-breaking and narrow spaces used as thousands separators
_WHITESPACE = re.compile(r'\s+')


def parse_price(value: Any) -> Optional[float]:
    """Parse a feed price; None when missing or not a finite number"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        price = float(value)
    else:
        text = _WHITESPACE.sub('', str(value)).replace(',', '.')
        if not text:
            return None
        try:
            price = float(text)
        except ValueError:
            logger.debug(f"Could not parse price: {value!r}")
            return None
    return price if math.isfinite(price) else None


def parse_in_stock(value: Any) -> bool:
    """Only a literal true (bool or the string "true") means in stock"""
    return value is True or value == "true"


def as_image_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [url for url in value if url]


@dataclass
class ImportStats:
    """Counters reported at the end of an import run"""
    categories_upserted: int = 0
    categories_linked: int = 0
    categories_skipped: int = 0
    categories_failed: int = 0
    deep_categories: int = 0
    brands_created: int = 0
    products_imported: int = 0
    products_failed: int = 0

    @property
    def errors(self) -> int:
        return self.categories_failed + self.products_failed

    def summary(self) -> str:
        lines = [
            f"Categories imported: {self.categories_upserted}",
            f"Categories linked:   {self.categories_linked}",
            f"Brands created:      {self.brands_created}",
            f"Products imported:   {self.products_imported}",
            f"Errors:              {self.errors}",
        ]
        if self.deep_categories:
            lines.append(f"Categories deeper than two levels (stored as level {CHILD_LEVEL}): {self.deep_categories}")
        return "\n".join(lines)


class BrandCache:
    """Brand name -> id for one import run. Never invalidated."""

    def __init__(self):
        self._ids: Dict[str, int] = {}

    def get(self, name: str) -> Optional[int]:
        return self._ids.get(name)

    def set(self, name: str, brand_id: int) -> None:
        self._ids[name] = brand_id

    def __contains__(self, name: str) -> bool:
        return name in self._ids

    def __len__(self) -> int:
        return len(self._ids)


class ImportService:
    """Writes a parsed feed to the store: categories, then brands and products.

    Records are processed one at a time. A failing record is logged and
    skipped; nothing already written is rolled back.
    """

    def __init__(self, supabase: AsyncClient, brand_cache: Optional[BrandCache] = None):
        self.brand_repo = BrandRepository(supabase)
        self.category_repo = CategoryRepository(supabase)
        self.product_repo = ProductRepository(supabase)
        self.brand_cache = brand_cache if brand_cache is not None else BrandCache()
        self.category_ids: Dict[str, int] = {}
        self.stats = ImportStats()

    async def run(self, feed: ParsedFeed) -> ImportStats:
        """Import a whole feed and return the run's counters"""
        if feed.categories:
            await self.import_categories(feed.categories)
        else:
            logger.warning("No categories found in feed")

        if feed.offers:
            await self.import_products(feed.offers)
        else:
            logger.warning("No offers found in feed")

        logger.info(
            f"Import finished: {self.stats.categories_upserted} categories, "
            f"{self.stats.products_imported} products, {self.stats.errors} errors"
        )
        return self.stats

    async def import_categories(self, categories: List[RawCategory]) -> Dict[str, int]:
        """
        Upsert categories by external id, then link children to parents.

        Linking runs as a second pass because a child may come before its
        parent in the feed.

        Returns:
            Mapping of feed category id -> store id
        """
        logger.info(f"Importing {len(categories)} categories...")
        add_breadcrumb("Category import started", category="import.categories", data={"count": len(categories)})

        for raw in categories:
            if not raw.name or not raw.name.strip():
                logger.warning(f"Category {raw.external_id} has no name, skipping")
                self.stats.categories_skipped += 1
                continue
            try:
                category = await self._upsert_category(raw)
            except RecordError as e:
                self._record_failed(e)
                self.stats.categories_failed += 1
                continue
            self.category_ids[raw.external_id] = category.id
            self.stats.categories_upserted += 1

        logger.info("Linking categories...")
        parent_of = {raw.external_id: raw.parent_external_id for raw in categories}
        for raw in categories:
            if raw.is_root() or raw.external_id not in self.category_ids:
                continue
            parent_id = self.category_ids.get(raw.parent_external_id)
            if parent_id is None:
                logger.warning(
                    f"Parent category {raw.parent_external_id} of {raw.external_id} not found, keeping it as root"
                )
                continue
            if parent_of.get(raw.parent_external_id) in self.category_ids:
                # Grandchildren share level 1 with children; parent_id is still correct
                logger.warning(
                    f"Category {raw.external_id} is nested deeper than two levels, storing level={CHILD_LEVEL}"
                )
                self.stats.deep_categories += 1
            try:
                await self.category_repo.set_parent(raw.external_id, parent_id, CHILD_LEVEL)
            except Exception as e:
                self._record_failed(RecordError("category", raw.external_id, f"linking failed: {e}"))
                self.stats.categories_failed += 1
                continue
            self.stats.categories_linked += 1

        logger.info(f"Categories: {self.stats.categories_upserted} imported, {self.stats.categories_linked} linked")
        return self.category_ids

    async def _upsert_category(self, raw: RawCategory) -> CategoryData:
        name = raw.name.strip()
        category = CategoryData(
            external_id=raw.external_id,
            name=name,
            slug=suffixed_slug(name, raw.external_id),
            level=ROOT_LEVEL,
        )
        try:
            return await self.category_repo.upsert_by_external_id(category)
        except Exception as e:
            raise RecordError("category", raw.external_id, str(e)) from e

    async def ensure_brand(self, vendor: Optional[str]) -> Optional[int]:
        """
        Find or create a brand by exact (trimmed) name.

        Store failures are logged and give no brand rather than failing
        the product.
        """
        name = (vendor or "").strip()
        if not name:
            return None

        cached = self.brand_cache.get(name)
        if cached is not None:
            return cached

        try:
            existing = await self.brand_repo.get_by_name(name)
        except Exception as e:
            logger.warning(f"Brand lookup failed ({name}): {e}")
            return None

        if existing:
            self.brand_cache.set(name, existing.id)
            return existing.id

        slug = suffixed_slug(name, random.randint(0, BRAND_SLUG_SUFFIX_MAX))
        try:
            created = await self.brand_repo.create(BrandData(name=name, slug=slug))
        except Exception as e:
            logger.warning(f"Brand creation failed ({name}): {e}")
            return None

        logger.info(f"New brand: {name}")
        self.brand_cache.set(name, created.id)
        self.stats.brands_created += 1
        return created.id

    async def import_products(self, offers: List[RawOffer]) -> int:
        """Upsert every offer; returns the number imported successfully"""
        logger.info(f"Processing {len(offers)} offers...")
        add_breadcrumb("Product import started", category="import.products", data={"count": len(offers)})

        for offer in offers:
            try:
                await self.import_offer(offer)
            except RecordError as e:
                self._record_failed(e)
                self.stats.products_failed += 1
                continue

            self.stats.products_imported += 1
            if self.stats.products_imported % PROGRESS_EVERY == 0:
                logger.info(f"Imported {self.stats.products_imported}/{len(offers)} products")

        logger.info(f"Finished! Imported {self.stats.products_imported} products.")
        return self.stats.products_imported

    async def import_offer(self, offer: RawOffer) -> ProductData:
        """
        Validate, resolve references and upsert one offer.

        Raises:
            RecordError: If the offer is invalid or the write fails
        """
        name = (offer.display_name or "").strip()
        if not name:
            raise RecordError("product", offer.external_id, "missing name and model")

        price = parse_price(offer.price)
        if price is None:
            raise RecordError("product", offer.external_id, f"missing or invalid price: {offer.price!r}")
        if price < 0:
            raise RecordError("product", offer.external_id, f"negative price: {price}")

        brand_id = await self.ensure_brand(offer.vendor)
        category_id = self._resolve_category(offer)

        product = ProductData(
            external_id=offer.external_id,
            name=name,
            slug=suffixed_slug(name, offer.external_id),
            description=offer.description,
            price=price,
            old_price=parse_price(offer.old_price),
            in_stock=parse_in_stock(offer.available),
            brand_id=brand_id,
            category_id=category_id,
            images=as_image_list(offer.pictures),
            attributes=normalize_attributes(offer.params, offer.vendor, offer.country_of_origin),
            vendor_code=offer.vendor_code,
        )

        try:
            return await self.product_repo.upsert_by_external_id(product)
        except Exception as e:
            raise RecordError("product", offer.external_id, str(e)) from e

    def _resolve_category(self, offer: RawOffer) -> Optional[int]:
        if not offer.category_external_id:
            return None
        category_id = self.category_ids.get(offer.category_external_id)
        if category_id is None:
            logger.warning(f"Category {offer.category_external_id} of offer {offer.external_id} not found")
        return category_id

    def _record_failed(self, error: RecordError) -> None:
        logger.error(f"Error importing {error.entity} {error.external_id}: {error.reason}")
        capture_error(error, {"entity": error.entity, "external_id": error.external_id})
