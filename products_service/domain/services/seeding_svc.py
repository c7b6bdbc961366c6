"""Idempotent catalog seeding.

Grows the catalog to a configured minimum size: curated base records first
(deterministic ids), then synthetic records with random unique ids. Safe to run
at every startup: a catalog already at the target is left untouched.
"""

from __future__ import annotations
import asyncio
import logging
import random
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set

from products_service.domain.exceptions import CatalogError, SeedingError
from products_service.domain.models.product import Product
from products_service.domain.repositories.product_repo import ProductRepo
from products_service.domain.services.constants import (
    SEED_CATEGORIES,
    SEED_ID_PREFIX,
    SEED_MAX_PRICE,
    SEED_MAX_STOCK,
    SEED_MIN_PRICE,
    SEED_PROGRESS_EVERY,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Base records
# ============================================================================

BASE_PRODUCTS: List[Product] = [
    Product(
        id="seed-1",
        name="Laptop Pro 15",
        description="High-performance laptop with 16GB RAM and 512GB SSD",
        price=1299.99,
        category="Electronics",
        stock=50,
    ),
    Product(
        id="seed-2",
        name="Wireless Mouse",
        description="Ergonomic wireless mouse with long battery life",
        price=29.99,
        category="Electronics",
        stock=200,
    ),
    Product(
        id="seed-3",
        name="Office Chair",
        description="Comfortable ergonomic office chair with lumbar support",
        price=199.99,
        category="Furniture",
        stock=30,
    ),
    Product(
        id="seed-4",
        name="Coffee Maker",
        description="Automatic drip coffee maker with programmable timer",
        price=79.99,
        category="Appliances",
        stock=75,
    ),
    Product(
        id="seed-5",
        name="Running Shoes",
        description="Lightweight running shoes with breathable mesh",
        price=89.99,
        category="Sports",
        stock=120,
    ),
]


# ============================================================================
# Synthetic records
# ============================================================================

BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
    "Globex",
    "Initech",
    "Umbrella",
]

ADJECTIVES = [
    "Premium", "Elite", "Pro", "Ultra", "Max", "Plus",
    "Classic", "Essential", "Advanced", "Smart", "Compact",
    "Flex", "Prime", "Apex", "Core", "Nova", "Titan",
]

NOUNS: dict[str, list[str]] = {
    "Electronics": ["Headphones", "Speaker", "Tablet", "Monitor", "Charger"],
    "Home": ["Lamp", "Blender", "Rug", "Kettle", "Shelf"],
    "Sports": ["Yoga Mat", "Dumbbell Set", "Jump Rope", "Football"],
    "Outdoors": ["Tent", "Backpack", "Sleeping Bag", "Lantern"],
    "Health": ["Thermometer", "Massager", "Scale", "First Aid Kit"],
    "Beauty": ["Hair Dryer", "Face Serum", "Brush Set", "Trimmer"],
    "Automotive": ["Dash Cam", "Tire Inflator", "Seat Cover", "Jump Starter"],
    "Toys": ["Puzzle", "Building Set", "Plush Bear", "RC Car"],
    "Books": ["Cookbook", "Novel", "Field Guide", "Atlas"],
}

FEATURES = [
    "long-lasting build",
    "a lightweight design",
    "easy one-touch controls",
    "a two-year warranty",
    "eco-friendly materials",
    "a compact footprint",
    "fast setup",
]


class ProductFactory:
    """Random product records drawn from a fixed category vocabulary.

    Pass a seeded `random.Random` for reproducible catalogs.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def new_id(self) -> str:
        return f"{SEED_ID_PREFIX}{uuid.UUID(int=self.rng.getrandbits(128), version=4).hex}"

    def make(self, product_id: str) -> Product:
        rng = self.rng
        category = rng.choice(SEED_CATEGORIES)
        noun = rng.choice(NOUNS.get(category, ["Product"]))
        name = f"{rng.choice(BRANDS)} {rng.choice(ADJECTIVES)} {noun}"
        description = f"{name} for everyday use, with {rng.choice(FEATURES)} and {rng.choice(FEATURES)}."
        return Product(
            id=product_id,
            name=name,
            description=description,
            price=round(rng.uniform(SEED_MIN_PRICE, SEED_MAX_PRICE), 2),
            category=category,
            stock=rng.randint(0, SEED_MAX_STOCK),
            created_at=datetime.now(timezone.utc),
        )


# ============================================================================
# Seeding engine
# ============================================================================


@dataclass
class SeedReport:
    existing: int      # records found before seeding
    base_created: int
    generated: int
    total: int         # records present after seeding

    @property
    def created(self) -> int:
        return self.base_created + self.generated


class CatalogSeeder:
    """Guarantees the catalog holds at least `target` records.

    Any write failure aborts the run with SeedingError; what was written stays.
    """

    def __init__(
        self,
        repo: ProductRepo,
        target: int,
        factory: Optional[ProductFactory] = None,
        write_batch_size: int = 200,
        base_products: Iterable[Product] = BASE_PRODUCTS,
    ) -> None:
        self.repo = repo
        self.target = target
        self.factory = factory or ProductFactory()
        self.write_batch_size = max(1, write_batch_size)
        self.base_products = list(base_products)

    async def _write(self, products: List[Product]) -> None:
        # every write of the batch settles before a failure is reported
        results = await asyncio.gather(
            *(self.repo.create_product(p) for p in products),
            return_exceptions=True,
        )
        failures = [(p, r) for p, r in zip(products, results) if isinstance(r, BaseException)]
        if not failures:
            return
        for product, err in failures[1:]:
            logger.warning("Failed to seed product id=%s err=%s", product.id, err)
        product, err = failures[0]
        if not isinstance(err, CatalogError):
            raise err
        raise SeedingError(f"failed to seed product {product.id} ({len(failures)} failed in batch): {err}") from err

    async def run(self) -> SeedReport:
        t0 = time.perf_counter()
        try:
            existing: Set[str] = await self.repo.existing_ids()
        except CatalogError as e:
            raise SeedingError(f"failed to enumerate existing products: {e}") from e
        found = len(existing)

        if found >= self.target:
            logger.info("Product catalog already seeded count=%s target=%s", found, self.target)
            return SeedReport(existing=found, base_created=0, generated=0, total=found)

        # Base records: always attempted first, only the missing ones
        missing_base = [p.with_defaults() for p in self.base_products if p.id not in existing]
        if missing_base:
            await self._write(missing_base)
            existing.update(p.id for p in missing_base)
        base_created = len(missing_base)

        generated = 0
        next_progress = (len(existing) // SEED_PROGRESS_EVERY + 1) * SEED_PROGRESS_EVERY
        while len(existing) < self.target:
            room = min(self.write_batch_size, self.target - len(existing))
            batch_ids: Set[str] = set()
            while len(batch_ids) < room:
                candidate = self.factory.new_id()
                # collisions count as already present, not errors
                if candidate in existing or candidate in batch_ids:
                    continue
                batch_ids.add(candidate)

            batch = [self.factory.make(pid) for pid in sorted(batch_ids)]
            await self._write(batch)
            existing.update(batch_ids)
            generated += len(batch)

            if len(existing) >= next_progress:
                logger.info("Seeding products count=%s target=%s", len(existing), self.target)
                next_progress = (len(existing) // SEED_PROGRESS_EVERY + 1) * SEED_PROGRESS_EVERY

        report = SeedReport(existing=found, base_created=base_created, generated=generated, total=len(existing))
        logger.info(
            "Ensured product seed data present count=%s base_created=%s generated=%s time=%.1fs",
            report.total, base_created, generated, time.perf_counter() - t0,
        )
        return report
