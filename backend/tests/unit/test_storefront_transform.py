"""
Unit tests for storefront_transform.

Tests variant flattening, image resolution order, title formatting and
landing page URLs.

Version: 1.0.0
"""
from decimal import Decimal

import pytest

from catalog_hub.utils.storefront_transform import (
    format_variant_title,
    landing_page_url,
    resolve_variant_image,
    transform_products,
)


pytestmark = pytest.mark.unit


class TestTransformProducts:

    def test_one_row_per_variant(self, sample_product_row):
        variants = transform_products([sample_product_row], "shop.example.com")

        assert [v.variant_id for v in variants] == [9001, 9002]
        first = variants[0]
        assert first.product_id == 7001
        assert first.title == "Linen Shirt - Blue / M"
        assert first.price == Decimal("29.90")
        assert first.compare_at_price == Decimal("39.90")
        assert first.weight == Decimal("250")
        assert first.inventory_quantity == 0
        assert first.landing_page_url == "https://shop.example.com/products/linen-shirt?variant=9001"

    def test_missing_sku_is_empty(self, sample_product_row):
        variants = transform_products([sample_product_row], "shop.example.com")
        assert variants[1].sku == ""

    def test_weight_falls_back(self, sample_product_row):
        sample_product_row["variants"][0].pop("grams")
        sample_product_row["variants"][0]["weight"] = 0

        variants = transform_products([sample_product_row], None)

        assert variants[0].weight == Decimal("0")
        assert variants[0].landing_page_url is None

    def test_empty(self):
        assert transform_products([], "shop.example.com") == []


class TestResolveVariantImage:

    def test_featured_image_first(self, sample_product_row):
        variant = sample_product_row["variants"][1]
        assert resolve_variant_image(variant, sample_product_row) == "https://cdn.example.com/red.jpg"

    def test_image_id_match(self, sample_product_row):
        variant = sample_product_row["variants"][0]
        assert resolve_variant_image(variant, sample_product_row) == "https://cdn.example.com/blue.jpg"

    def test_falls_back_to_first_image(self, sample_product_row):
        assert resolve_variant_image({"id": 1}, sample_product_row) == "https://cdn.example.com/first.jpg"

    def test_no_images(self):
        assert resolve_variant_image({"id": 1}, {"images": []}) is None


class TestTitlesAndUrls:

    def test_default_title_uses_product_title(self):
        assert format_variant_title("Mug", "Default Title") == "Mug"

    def test_combined_title(self):
        assert format_variant_title("Mug", "Large") == "Mug - Large"

    def test_landing_page_url(self):
        assert landing_page_url("shop.example.com", "mug", 5) == "https://shop.example.com/products/mug?variant=5"
