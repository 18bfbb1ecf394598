"""Ingredient name normalization, alias resolution and shopping categories."""

import re

# Canonical key -> known synonyms
INGREDIENT_ALIASES: dict[str, list[str]] = {
    "flour": ["all-purpose flour", "ap flour", "plain flour", "white flour"],
    "onion": ["yellow onion", "white onion", "onions"],
    "garlic": ["garlic cloves", "garlic clove"],
    "salt": ["table salt", "kosher salt"],
    "sugar": ["white sugar", "granulated sugar"],
    "butter": ["unsalted butter", "salted butter"],
    "oil": ["vegetable oil", "cooking oil", "canola oil"],
    "pepper": ["black pepper", "ground pepper"],
    "milk": ["whole milk", "2% milk", "skim milk"],
}

DESCRIPTOR_WORDS: frozenset[str] = frozenset(
    {
        "fresh",
        "freshly",
        "dried",
        "frozen",
        "canned",
        "ground",
        "chopped",
        "diced",
        "sliced",
        "minced",
        "grated",
        "shredded",
        "crushed",
        "finely",
        "roughly",
        "coarsely",
        "thinly",
        "peeled",
        "softened",
        "melted",
        "large",
        "small",
        "medium",
    }
)

# Irregular "-oes" plurals
OES_PLURALS: dict[str, str] = {
    "tomatoes": "tomato",
    "potatoes": "potato",
    "mangoes": "mango",
    "avocadoes": "avocado",
    "heroes": "hero",
    "echoes": "echo",
}

# Words that end in "s" without being plural
NON_PLURAL_WORDS: frozenset[str] = frozenset(
    {
        "molasses",
        "hummus",
        "asparagus",
        "couscous",
        "swiss",
        "brussels",
        "oats",
        "grits",
        "series",
    }
)

_PARENTHETICAL_RE = re.compile(r"\([^)]*\)?")

INGREDIENT_CATEGORIES: dict[str, list[str]] = {
    "Spices & Seasonings": [
        "salt", "pepper", "paprika", "cumin", "coriander", "turmeric", "cinnamon", "nutmeg",
        "cloves", "allspice", "cardamom", "ginger", "garlic", "onion", "shallot", "herbs",
        "basil", "oregano", "thyme", "rosemary", "parsley", "cilantro", "dill", "sage",
        "bay leaf", "vanilla", "extract", "spice", "seasoning", "chili", "cayenne",
        "red pepper", "black pepper", "white pepper", "curry", "mustard", "horseradish",
    ],
    "Oils & Fats": [
        "oil", "butter", "margarine", "shortening", "lard", "coconut oil", "olive oil",
        "vegetable oil", "canola oil", "sesame oil", "avocado oil", "ghee", "bacon fat",
        "duck fat", "schmaltz",
    ],
    "Vegetables": [
        "carrot", "celery", "onion", "garlic", "potato", "tomato", "pepper", "bell pepper",
        "mushroom", "zucchini", "squash", "eggplant", "broccoli", "cauliflower", "cabbage",
        "lettuce", "spinach", "kale", "chard", "asparagus", "green beans", "peas", "corn",
        "cucumber", "radish", "turnip", "parsnip", "beet", "leek", "shallot", "scallion",
        "green onion", "fennel", "artichoke", "brussels", "sprout", "bok choy", "kohlrabi",
    ],
    "Fruits": [
        "apple", "banana", "orange", "lemon", "lime", "grapefruit", "berry", "strawberry",
        "blueberry", "raspberry", "blackberry", "cranberry", "grape", "pear", "peach", "plum",
        "apricot", "cherry", "mango", "pineapple", "papaya", "kiwi", "melon", "watermelon",
        "cantaloupe", "honeydew", "date", "fig", "pomegranate", "avocado",
    ],
    "Dairy & Eggs": [
        "milk", "cream", "half and half", "buttermilk", "yogurt", "sour cream", "cheese",
        "cheddar", "mozzarella", "parmesan", "ricotta", "cottage cheese", "cream cheese",
        "feta", "goat cheese", "blue cheese", "swiss", "gouda", "brie", "eggs", "egg",
        "butter", "margarine",
    ],
    "Meat & Seafood": [
        "beef", "pork", "chicken", "turkey", "duck", "lamb", "veal", "bacon", "sausage", "ham",
        "prosciutto", "pancetta", "salmon", "tuna", "cod", "halibut", "shrimp", "crab",
        "lobster", "scallop", "mussel", "clam", "oyster", "squid", "octopus", "anchovy",
        "sardine",
    ],
    "Grains & Bread": [
        "flour", "wheat", "rice", "pasta", "noodle", "bread", "bun", "roll", "bagel", "pita",
        "tortilla", "quinoa", "barley", "oats", "oatmeal", "couscous", "bulgur", "polenta",
        "cornmeal", "breadcrumb", "cracker", "cereal",
    ],
    "Legumes & Nuts": [
        "bean", "black bean", "kidney bean", "chickpea", "lentil", "split pea", "peanut",
        "almond", "walnut", "pecan", "cashew", "pistachio", "hazelnut", "macadamia",
        "pine nut", "sesame", "sunflower seed", "pumpkin seed", "chia", "flax",
    ],
    "Pantry Staples": [
        "sugar", "brown sugar", "powdered sugar", "honey", "maple syrup", "molasses",
        "corn syrup", "vinegar", "balsamic", "rice vinegar", "wine vinegar", "soy sauce",
        "tamari", "worcestershire", "hot sauce", "sriracha", "ketchup", "mayonnaise",
        "mustard", "relish", "pickle", "olive", "capers", "sundried tomato", "tomato paste",
        "tomato sauce", "broth", "stock", "bouillon", "bouillon cube", "baking powder",
        "baking soda", "yeast", "cocoa", "chocolate", "coconut",
    ],
    "Beverages": [
        "wine", "beer", "juice", "coffee", "tea", "water", "soda", "sparkling", "broth", "stock",
    ],
}

DEFAULT_CATEGORY = "Other"
CATEGORY_ORDER: tuple[str, ...] = (*INGREDIENT_CATEGORIES, DEFAULT_CATEGORY)


def singularize(word: str) -> str:
    """Minimal plural-to-singular heuristic for the last word of a name."""
    if word in OES_PLURALS:
        return OES_PLURALS[word]
    if word in NON_PLURAL_WORDS or len(word) <= 3:
        return word
    if word.endswith(("ss", "us", "is")):
        return word
    if word.endswith("s"):
        return word[:-1]
    return word


def clean_ingredient_name(name: str) -> str:
    """
    Reduce a free-text ingredient name to comparable form.

    - Lowercase and trim
    - Drop parenthetical asides and anything after the first comma
    - Strip descriptor words (fresh, chopped, large, ...) from either end
    - Collapse whitespace and singularize the last word
    """
    if not name:
        return ""

    cleaned = name.lower().strip()
    cleaned = _PARENTHETICAL_RE.sub(" ", cleaned)
    cleaned = cleaned.split(",", 1)[0]

    words = cleaned.split()
    while len(words) > 1 and words[0] in DESCRIPTOR_WORDS:
        words.pop(0)
    while len(words) > 1 and words[-1] in DESCRIPTOR_WORDS:
        words.pop()

    if not words:
        return ""

    words[-1] = singularize(words[-1])
    return " ".join(words)


def resolve_alias(cleaned: str) -> str:
    """
    Map a cleaned name onto its canonical key.

    Matches when the name equals a key, contains one of the key's aliases,
    or is itself contained in an alias.
    """
    if not cleaned:
        return ""
    for key, aliases in INGREDIENT_ALIASES.items():
        if cleaned == key:
            return key
        if any(alias in cleaned or cleaned in alias for alias in aliases):
            return key
    return cleaned


def normalize_ingredient_name(name: str) -> str:
    """Return the canonical key used to group an ingredient across recipes."""
    return resolve_alias(clean_ingredient_name(name))


def get_ingredient_category(ingredient_name: str) -> str:
    """Pick the category whose longest keyword appears in the name."""
    if not ingredient_name:
        return DEFAULT_CATEGORY

    name_lower = ingredient_name.lower()
    best_match = DEFAULT_CATEGORY
    best_length = 0
    for category, keywords in INGREDIENT_CATEGORIES.items():
        for keyword in keywords:
            if keyword in name_lower and len(keyword) > best_length:
                best_match = category
                best_length = len(keyword)
    return best_match
