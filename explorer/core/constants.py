"""
Core constants used across the application. Keep these simple and documented.
"""

# Storage key suffix for every persisted facet, keyed by FilterState field name.
# The suffixes match the keys the web client has always written.
FACET_STORAGE_KEYS: dict[str, str] = {
    "view_mode": "view",
    "only_flagged": "onlyRecipes",
    "sort_key": "sort",
    "cuisines": "cuisines",
    "meal_types": "meals",
    "dietary": "diets",
    "difficulty": "difficulty",
    "max_cook_time_minutes": "maxCook",
    "min_rating": "minRating",
    "ethnicities": "ethnicities",
    "excluded_allergens": "allergens",
    "preparation_tags": "prep",
    "facet_search_query": "dietQuery",
}

# Repeated query parameter for every multi-select facet, in request order.
MULTI_SELECT_PARAMS: dict[str, str] = {
    "cuisines": "cuisine",
    "meal_types": "meal",
    "dietary": "diet",
    "ethnicities": "ethnicity",
    "excluded_allergens": "exclude_allergen",
    "preparation_tags": "preparation",
}

QUERY_KEY_NAMESPACE: str = "explore-data"
DEFAULT_NAMESPACE: str = "default"
