"""
Prompt templates for the upstream model.

Rendering is deterministic: the same request always produces the same text.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List

from core.models import MEDICINE_SENTINEL, NutritionTotals

RECOGNITION_PROMPT_TEMPLATE = (
    "Analyze the image for edible food items. "
    "From this specific list ONLY: {supported_foods}, identify each food item visible. "
    "Ignore all non-food items, packaging, or medication. "
    "For each identified food, provide its name, estimated weight in grams, and a confidence score (0-1). "
    'Return a valid JSON array of objects: [{{"foodName": "...", "estimatedWeight": ..., "confidenceScore": ...}}]. '
    "If no listed foods are found, return an empty array []. "
    "If you see something that looks like medication, return "
    '[{{"foodName": "{sentinel}", "estimatedWeight": 0, "confidenceScore": 1}}].'
)

N_SCORE_PROMPT_TEMPLATE = """
You are 'N-Score', the analysis AI for the "Nutri Scan" app. Your tone is playful, motivating, and insightful, like a fun health coach. You NEVER give medical advice.

A user just ate a meal consisting of: {food_names}.

The meal's total nutritional breakdown is:
{breakdown}

Based on this data, provide two things in a valid JSON object:
1.  "nScore": A holistic "N-Score" from 0 (least healthy) to 100 (most healthy). Base this on a good balance of macros (protein, fat, carbs), high fiber, and low sugar & sodium.
2.  "message": A short, fun, and insightful statement (1-2 sentences) about the meal, using one of these tones: Playful Awareness, Fun Comparison, Positive Reinforcement, Smart Suggestion, or Educational Insight.

Example 1 (Healthy):
{{"nScore": 92, "message": "Broccoli wins again! 🥦 You’re fueling clean — your body’s high-fiving you right now 👏."}}

Example 2 (Unhealthy):
{{"nScore": 28, "message": "This snack is ultra-processed 🧪 and packed with quick carbs ⚡ — good for taste buds, not your goals!"}}

Example 3 (Mixed):
{{"nScore": 65, "message": "This meal's score dropped because it's high in sodium. A little less sauce next time = a higher N-Score! 📈"}}

Example 4 (Sugary):
{{"nScore": 40, "message": "You just had 3 cookies’ worth of sugar 🍪… disguised as a ‘healthy bar’ 🤭."}}

Now, analyze the user's meal and provide the JSON response.
"""

FALLBACK_FOOD_NAME = "a food item"


def join_names(names: List[str]) -> str:
    return ", ".join(names)


def to_fixed(value: float, places: int) -> str:
    """Fixed-point text with exact halves rounded away from zero, like JS toFixed."""
    exponent = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))


def format_breakdown(totals: NutritionTotals) -> str:
    """Render the totals as a bullet list: whole numbers for kcal, mg and weight, one decimal for grams."""
    lines = [
        f"- Calories: {to_fixed(totals.calories, 0)}",
        f"- Protein: {to_fixed(totals.protein, 1)}g",
        f"- Fat: {to_fixed(totals.fat, 1)}g",
        f"- Carbohydrates: {to_fixed(totals.carbs, 1)}g",
        f"- Sugar: {to_fixed(totals.sugar, 1)}g",
        f"- Fiber: {to_fixed(totals.fiber, 1)}g",
        f"- Sodium: {to_fixed(totals.sodium, 0)}mg",
    ]
    if totals.total_weight is not None:
        lines.append(f"- Total Weight: {to_fixed(totals.total_weight, 0)}g")
    return "\n".join(lines)


def build_recognition_prompt(supported_foods: List[str]) -> str:
    return RECOGNITION_PROMPT_TEMPLATE.format(
        supported_foods=join_names(supported_foods),
        sentinel=MEDICINE_SENTINEL,
    )


def build_n_score_prompt(totals: NutritionTotals, food_names: List[str]) -> str:
    return N_SCORE_PROMPT_TEMPLATE.format(
        food_names=join_names(food_names) or FALLBACK_FOOD_NAME,
        breakdown=format_breakdown(totals),
    )
