"""Seed script for storefront catalog data.

Creates the two top-level categories, a few brands, sample products, a
default tax rate, a welcome coupon and a hero banner so the storefront and
checkout can be exercised end-to-end.

Usage:
    python -m scripts.seed.store
"""

import asyncio
from decimal import Decimal

from sqlalchemy import func, select

from libs.common.config import get_settings
from libs.db.config import Database
from services.storefront_service.models import (
    Banner,
    Brand,
    Category,
    Coupon,
    DiscountType,
    Product,
    TaxRate,
)

settings = get_settings()


async def seed_store_data():
    database = Database.from_settings(settings)
    async with database.session_factory() as db:
        print("Seeding storefront data...")

        count = (await db.execute(select(func.count(Category.id)))).scalar()
        if count:
            print(f"Store data already exists ({count} categories). Skipping seed.")
            await database.dispose()
            return

        # =========================================================================
        # 1. CATEGORIES
        # =========================================================================
        categories = {
            "thrift": Category(
                name="Thrift Store",
                slug="thrift-store",
                description="Curated pre-loved pieces, each one of a kind",
                sort_order=1,
            ),
            "originals": Category(
                name="ReWeara Originals",
                slug="reweara-originals",
                description="New designs made from sustainable materials",
                sort_order=2,
            ),
        }
        db.add_all(categories.values())

        # =========================================================================
        # 2. BRANDS
        # =========================================================================
        brands = {
            "levis": Brand(name="Levi's", slug="levis", is_featured=True, sort_order=1),
            "zara": Brand(name="Zara", slug="zara", sort_order=2),
            "reweara": Brand(
                name="ReWeara",
                slug="reweara",
                description="Our in-house sustainable label",
                is_featured=True,
                sort_order=0,
            ),
        }
        db.add_all(brands.values())
        await db.flush()

        # =========================================================================
        # 3. PRODUCTS
        # =========================================================================
        products = [
            Product(
                category_id=categories["thrift"].id,
                brand_id=brands["levis"].id,
                name="Vintage Denim Jacket",
                slug="vintage-denim-jacket",
                description="Classic 90s trucker jacket, lightly faded.",
                price=Decimal("1250"),
                original_price=Decimal("3999"),
                condition="Like New",
                size="M",
                color="Blue",
                material="Denim",
                eco_badges=["pre-loved", "water-saving"],
                images=["/images/products/vintage-denim-jacket.jpg"],
                is_thrift=True,
                is_featured=True,
                stock=1,
            ),
            Product(
                category_id=categories["thrift"].id,
                brand_id=brands["zara"].id,
                name="Linen Summer Dress",
                slug="linen-summer-dress",
                description="Breezy linen midi dress.",
                price=Decimal("899"),
                condition="Good",
                size="S",
                color="Beige",
                material="Linen",
                eco_badges=["pre-loved"],
                is_thrift=True,
                is_hot_selling=True,
                stock=1,
            ),
            Product(
                category_id=categories["originals"].id,
                brand_id=brands["reweara"].id,
                name="Organic Cotton Tee",
                slug="organic-cotton-tee",
                description="GOTS-certified organic cotton, naturally dyed.",
                price=Decimal("500"),
                sizes=["S", "M", "L", "XL"],
                color="White",
                fabric="100% organic cotton",
                wash_care="Cold wash, line dry",
                eco_badges=["organic", "fair-trade"],
                is_original=True,
                is_featured=True,
                stock=40,
            ),
            Product(
                category_id=categories["originals"].id,
                brand_id=brands["reweara"].id,
                name="Recycled Leather Bag",
                slug="recycled-leather-bag",
                description="Tote made from reclaimed leather offcuts.",
                price=Decimal("1500"),
                color="Tan",
                material="Recycled leather",
                eco_badges=["upcycled"],
                is_original=True,
                is_hot_selling=True,
                stock=12,
            ),
        ]
        db.add_all(products)

        # =========================================================================
        # 4. TAX, COUPON, BANNER
        # =========================================================================
        db.add(TaxRate(name="GST", rate=Decimal("5.00"), country="India", priority=1))
        db.add(
            Coupon(
                code="WELCOME10",
                description="10% off your first order",
                discount_type=DiscountType.PERCENTAGE,
                discount_value=Decimal("10"),
                max_discount_amount=Decimal("300"),
                usage_limit=500,
            )
        )
        db.add(
            Banner(
                title="Wear the change",
                subtitle="Thrifted and original sustainable fashion",
                image_url="/images/banners/hero.jpg",
                link_url="/products",
                button_text="Shop now",
                position="hero",
            )
        )

        await db.commit()
        print(
            f"Seeded {len(categories)} categories, {len(brands)} brands, "
            f"{len(products)} products."
        )

    await database.dispose()


if __name__ == "__main__":
    asyncio.run(seed_store_data())
