"""
Canonical allergen and safety constants — single source of truth for all allergy logic.
The profile editor, the safety filter and the prompt builder import exclusively from here.
"""

# Allergens offered by the profile editor (users may also add custom ones)
COMMON_ALLERGENS = [
    "Peanuts", "Tree Nuts", "Milk", "Eggs", "Wheat", "Soy",
    "Fish", "Shellfish", "Sesame", "Gluten", "Lactose", "Celiac",
]

DIETARY_PREFERENCES = [
    "Vegetarian", "Vegan", "Pescatarian", "Kosher",
    "Halal", "Keto", "Low FODMAP", "Dairy-Free",
]

SEVERITY_LEVELS = ["mild", "moderate", "severe"]

SEVERITY_DESCRIPTIONS: dict[str, str] = {
    "mild":     "Minor discomfort",
    "moderate": "Significant reaction",
    "severe":   "Anaphylaxis risk",
}

# Applied when an allergy has no recorded severity
DEFAULT_SEVERITY = "moderate"

# Applied when a dish has no curated safety score
DEFAULT_SAFETY_SCORE = 90

# Badge thresholds, checked top-down: score >= threshold → badge
SAFETY_BADGE_THRESHOLDS: list[tuple[int, str]] = [
    (90, "safe"),
    (75, "caution"),
]
FALLBACK_BADGE = "avoid"

FEEDBACK_TYPES = ("safe", "issue")
