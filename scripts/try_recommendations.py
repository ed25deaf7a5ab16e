#!/usr/bin/env python3
"""
Recommendation Pipeline Local Runner

Runs the recommendation pipeline against the configured language model
without a Supabase project. Activity signals and the catalog come from an
in-memory sample, so you can see how the model's category preferences map
to products.

Usage:
    python scripts/try_recommendations.py
    python scripts/try_recommendations.py --viewed "Smart Bulb" "Wi-Fi Plug" --cart "USB-C Hub"
    python scripts/try_recommendations.py --provider gemini --debug
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from storefront.config import settings
from storefront.services.ai_gateway import AIGatewayError
from storefront.services.recommendation_service import get_recommendations


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


SAMPLE_CATALOG: List[Dict[str, Any]] = [
    {"id": "p-1", "name": "Noise Cancelling Headphones", "category": "electronics", "price": 8999, "rating": 4.7, "rating_count": 2311, "in_stock": True},
    {"id": "p-2", "name": "4K Action Camera", "category": "electronics", "price": 15999, "rating": 4.4, "rating_count": 842, "in_stock": True},
    {"id": "p-3", "name": "USB-C Hub 7-in-1", "category": "accessories", "price": 1999, "rating": 4.5, "rating_count": 3120, "in_stock": True},
    {"id": "p-4", "name": "Leather Laptop Sleeve", "category": "accessories", "price": 1499, "rating": 4.2, "rating_count": 410, "in_stock": False},
    {"id": "p-5", "name": "Smart Bulb (Colour)", "category": "smart home", "price": 799, "rating": 4.6, "rating_count": 5210, "in_stock": True},
    {"id": "p-6", "name": "Wi-Fi Smart Plug", "category": "smart home", "price": 999, "rating": 4.3, "rating_count": 1904, "in_stock": True},
]


class _Result:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class _Query:
    """Minimal in-memory stand-in for the postgrest query builder."""

    def __init__(self, rows: List[Dict[str, Any]]):
        self._rows = rows

    def select(self, *_args, **_kwargs) -> "_Query":
        return self

    def eq(self, column: str, value: Any) -> "_Query":
        return _Query([r for r in self._rows if r.get(column) == value])

    def order(self, column: str, desc: bool = False) -> "_Query":
        return _Query(sorted(self._rows, key=lambda r: r.get(column) or 0, reverse=desc))

    def limit(self, size: int) -> "_Query":
        return _Query(self._rows[:size])

    def execute(self) -> _Result:
        return _Result(list(self._rows))


class SampleSupabaseClient:
    """Serves the sample catalog and activity signals built from product names."""

    def __init__(self, user_id: str, viewed: List[str], cart: List[str], purchased: List[str]):
        by_name = {p["name"]: p for p in SAMPLE_CATALOG}

        def signal_rows(names: List[str]) -> List[Dict[str, Any]]:
            rows = []
            for name in names:
                product = by_name.get(name, {"id": None, "name": name, "category": None})
                rows.append({
                    "user_id": user_id,
                    "product_id": product["id"],
                    "products": {"name": product["name"], "category": product["category"]},
                })
            return rows

        self._tables = {
            "products": SAMPLE_CATALOG,
            "browsing_history": signal_rows(viewed),
            "cart_items": signal_rows(cart),
            "purchases": signal_rows(purchased),
        }

    def table(self, name: str) -> _Query:
        return _Query(self._tables.get(name, []))


def print_result(products: List[Dict[str, Any]]) -> None:
    """Pretty print the recommendations."""
    print("\n" + "=" * 60)
    print(f"RECOMMENDATIONS: {len(products)}")
    print("=" * 60)

    for i, product in enumerate(products, 1):
        print(f"  {i}. [{product['category']}] {product['name']} "
              f"(rating {product['rating']}, INR {product['price']})")
    print()


async def run(
    viewed: List[str],
    cart: List[str],
    purchased: List[str],
    user_id: str = "local-user",
) -> Optional[List[Dict[str, Any]]]:
    """Run the pipeline once and print the result."""
    print("\n" + "=" * 60)
    print(f"RECOMMENDATION PIPELINE (provider: {settings.LLM_PROVIDER})")
    print("=" * 60)
    print(f"Viewed:    {', '.join(viewed) or 'None'}")
    print(f"Cart:      {', '.join(cart) or 'None'}")
    print(f"Purchased: {', '.join(purchased) or 'None'}")

    client = SampleSupabaseClient(user_id, viewed, cart, purchased)

    try:
        products = await get_recommendations(client, user_id)  # type: ignore[arg-type]
    except AIGatewayError as e:
        print(f"\nModel provider error ({e.status_code}): {e.message}\n")
        return None

    print_result(products)
    return products


def main():
    parser = argparse.ArgumentParser(
        description="Run the recommendation pipeline against the sample catalog"
    )
    parser.add_argument("--viewed", nargs="*", default=["Smart Bulb (Colour)", "Wi-Fi Smart Plug"],
                        help="Names of recently viewed products")
    parser.add_argument("--cart", nargs="*", default=["USB-C Hub 7-in-1"],
                        help="Names of products in the cart")
    parser.add_argument("--purchased", nargs="*", default=[],
                        help="Names of purchased products")
    parser.add_argument("--provider", choices=["gateway", "gemini"],
                        help="Override LLM_PROVIDER")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging (prints the prompt)")

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.provider:
        settings.LLM_PROVIDER = args.provider

    asyncio.run(run(viewed=args.viewed, cart=args.cart, purchased=args.purchased))


if __name__ == "__main__":
    main()
