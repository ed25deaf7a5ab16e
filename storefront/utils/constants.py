"""
Catalog and recommendation constants.

The category universe mirrors the values stored in products.category.
"""

PRODUCT_CATEGORIES = ("electronics", "accessories", "smart home")

# Number of category preferences requested from the model (and max products returned)
RECOMMENDATION_COUNT = 6

# Used whenever the model output cannot be parsed as a JSON array of strings
FALLBACK_CATEGORY_PREFERENCES = [
    "electronics",
    "accessories",
    "smart home",
    "electronics",
    "accessories",
    "smart home",
]

# Signal window sizes for the recommendation prompt
BROWSING_HISTORY_LIMIT = 10
PURCHASE_HISTORY_LIMIT = 10

# Home page "top rated" grid and account purchase list
TOP_RATED_DEFAULT_LIMIT = 12
ACCOUNT_PURCHASES_LIMIT = 10

# Cart rows are unique per (user_id, product_id)
CART_CONFLICT_COLUMNS = "user_id,product_id"
