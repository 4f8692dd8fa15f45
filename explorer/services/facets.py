"""
Option catalogs for the explore filter menus and the search helper that narrows them.
"""

from collections.abc import Iterable

from explorer.models.filters import Facet, InvalidFacetError

CUISINES = sorted(
    [
        "African", "Alaskan", "American", "Argentinian", "Austrian", "Baja", "Basque", "Belgian", "Brazilian",
        "British", "Bulgarian", "Cajun", "Californian", "Caribbean", "Catalan", "Central Asian", "Chilean",
        "Chinese (Cantonese)", "Chinese (Hunan)", "Chinese (Shandong)", "Chinese (Sichuan)", "Colombian", "Creole",
        "Cuban", "Czech", "Dutch", "Eastern European", "Egyptian", "Ethiopian", "Finnish", "French", "Fusion",
        "German", "Greek", "Haitian", "Hawaiian", "Hungarian", "Indonesian", "Irish", "Israeli", "Italian",
        "Jamaican", "Japanese", "Jordanian", "Kazakh", "Kenyan", "Korean", "Kurdish", "Lebanese", "Malaysian",
        "Mediterranean", "Mexican", "Middle Eastern", "Moroccan", "Nepali", "New Mexican", "North African",
        "Oaxacan", "Pakistani", "Palestinian", "Peruvian", "Polish", "Portuguese", "Puerto Rican", "Romanian",
        "Russian", "Scottish", "Senegalese", "Sicilian", "Singaporean", "Somali", "Spanish", "Sri Lankan", "Swiss",
        "Taiwanese", "Tex-Mex", "Thai", "Tunisian", "Turkish", "Uighur", "Ukrainian", "Uzbek", "Vietnamese",
        "Yemeni", "Yucatecan",
    ]
)  # fmt: skip

MEAL_TYPES = ["Breakfast", "Brunch", "Lunch", "Dinner", "Snack", "Dessert"]

DIFFICULTIES = ["Easy", "Medium", "Hard"]

DIETARY = sorted(
    [
        "Vegetarian", "Vegan", "Pescatarian", "Keto", "Paleo", "Mediterranean", "Whole30", "Flexitarian",
        "High-Protein", "High-Fiber", "Low-Carb", "Low-Fat", "Low-Calorie", "Diabetic-Friendly", "Heart-Healthy",
        "Low-Sodium", "Low-Sugar", "Low-FODMAP", "Gluten-Free", "Lactose-Free", "Dairy-Free", "Egg-Free",
        "Nut-Free", "Soy-Free", "Shellfish-Free",
    ]
)  # fmt: skip

ALLERGENS = sorted(["Gluten", "Dairy", "Eggs", "Peanuts", "Tree Nuts", "Soy", "Fish", "Shellfish", "Sesame", "Mustard"])

# Religious preparation rules and sourcing standards share one facet
PREPARATION_STANDARDS = ["Fair Trade", "Free-Range", "Halal", "Kosher", "Non-GMO", "Organic"]

ETHNICITY_GROUPS: dict[str, list[str]] = {
    "Africa": [
        "Algerian", "Cameroonian", "Egyptian", "Eritrean", "Ethiopian", "Ghanaian", "Ivorian", "Kenyan",
        "Moroccan", "Nigerian", "Senegalese", "Somali", "South African", "Tanzanian", "Tunisian", "Ugandan",
    ],
    "Middle East / Southwest Asia": [
        "Armenian", "Georgian", "Gulf (Khaleeji)", "Israeli", "Jordanian", "Kurdish", "Lebanese", "Levantine",
        "Middle Eastern", "Palestinian", "Persian (Iranian)", "Syrian", "Turkish", "Yemeni",
    ],
    "South Asia": [
        "Bangladeshi", "Bengali", "Goan", "Gujarati", "Hyderabadi", "Jain", "Kashmiri", "Maharashtrian", "Nepali",
        "North Indian (Punjabi)", "Pakistani", "Rajasthani", "South Indian (Tamil)", "Sri Lankan",
    ],
    "East Asia": [
        "Chinese (Cantonese)", "Chinese (Hunan)", "Chinese (Shandong)", "Chinese (Sichuan)", "Japanese", "Korean",
        "Mongolian", "Taiwanese",
    ],
    "Southeast Asia": [
        "Filipino", "Indonesian", "Khmer (Cambodian)", "Lao", "Malaysian", "Singaporean", "Thai", "Vietnamese",
    ],
    "Central Asia": ["Kazakh", "Uighur", "Uzbek"],
    "Europe": [
        "Austrian", "Balkan", "Basque", "Belgian", "British", "Bulgarian", "Catalan", "Czech", "Dutch", "Finnish",
        "French", "German", "Greek", "Hungarian", "Irish", "Italian", "Polish", "Portuguese", "Romanian",
        "Russian", "Scandinavian", "Scottish", "Sicilian", "Slovak", "Spanish", "Swiss", "Ukrainian",
    ],
    "The Americas - United States": [
        "Alaskan", "American", "Cajun", "Californian", "Creole", "Hawaiian", "New Mexican", "Pacific Northwest",
        "Southern / Soul Food", "Tex-Mex",
    ],
    "The Americas - Mexico": ["Baja", "Mexican", "Oaxacan", "Yucatecan"],
    "The Americas - Caribbean": ["Caribbean", "Cuban", "Dominican", "Jamaican", "Puerto Rican"],
    "The Americas - Central & South": ["Argentinian", "Brazilian", "Chilean", "Colombian", "Peruvian", "Venezuelan"],
    "Broad / Other": ["Fusion", "Mediterranean", "North African", "Pan-Asian"],
}  # fmt: skip

ETHNICITIES = sorted({value for options in ETHNICITY_GROUPS.values() for value in options})

FACET_OPTIONS: dict[Facet, list[str]] = {
    Facet.CUISINES: CUISINES,
    Facet.MEAL_TYPES: MEAL_TYPES,
    Facet.DIETARY: DIETARY,
    Facet.ETHNICITIES: ETHNICITIES,
    Facet.EXCLUDED_ALLERGENS: ALLERGENS,
    Facet.PREPARATION_TAGS: PREPARATION_STANDARDS,
    Facet.DIFFICULTY: DIFFICULTIES,
}


def search_options(options: Iterable[str], query: str | None) -> list[str]:
    """Alphabetical options containing the query, case-insensitive. A blank query keeps everything."""
    needle = (query or "").strip().lower()
    return sorted(option for option in options if needle in option.lower())


def search_ethnicity_groups(query: str | None) -> dict[str, list[str]]:
    """Narrow every region to matching options, dropping regions left empty."""
    narrowed = {label: search_options(options, query) for label, options in ETHNICITY_GROUPS.items()}
    return {label: options for label, options in narrowed.items() if options}


def options_for(facet: Facet, query: str | None = None) -> list[str]:
    if facet not in FACET_OPTIONS:
        raise InvalidFacetError(f"{facet.value} has no option catalog")
    return search_options(FACET_OPTIONS[facet], query)
