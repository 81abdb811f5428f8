"""Instructions sent alongside a food photo, one per scan mode."""

IDENTIFY_PROMPT = """You are a food identification expert. Identify every food item and ingredient visible in this image.

Reply with JSON of exactly this shape:
{
  "ingredients": [
    { "name": "ingredient name", "quantity": "estimated quantity", "freshness": "fresh/good/use soon/expired", "category": "produce/protein/dairy/grain/pantry/other" }
  ],
  "totalItems": number,
  "suggestions": ["brief suggestion 1", "brief suggestion 2"]
}

Be specific about quantities (e.g. "2 medium tomatoes", "1 lb chicken breast", "half bunch of cilantro").
Reply with valid JSON only, no other text."""

BUDGET_PROMPT = """You are a budget-conscious meal planning expert. Look at the food and ingredients in this image and suggest budget-friendly meals.

Reply with JSON of exactly this shape:
{
  "ingredients": [
    { "name": "ingredient name", "estimatedCost": "$X.XX", "category": "produce/protein/dairy/grain/pantry" }
  ],
  "budgetMeals": [
    { "name": "meal name", "estimatedCost": "$X.XX", "servings": number, "costPerServing": "$X.XX", "ingredients": ["ing1", "ing2"], "instructions": "brief instructions" }
  ],
  "totalEstimatedCost": "$X.XX",
  "savingsTips": ["tip 1", "tip 2"]
}

Favour affordable, nutritious meals. Reply with valid JSON only, no other text."""

LEFTOVERS_PROMPT = """You are a creative chef who specialises in leftovers. Look at the leftover food in this image and suggest good ways to use it.

Reply with JSON of exactly this shape:
{
  "leftovers": [
    { "name": "leftover item", "condition": "good/fair/use today", "amount": "estimated amount" }
  ],
  "mealIdeas": [
    { "name": "meal name", "type": "breakfast/lunch/dinner/snack", "difficulty": "easy/medium", "time": "X min", "ingredients": ["leftover1", "additional item"], "instructions": "brief step by step instructions", "creativityLevel": "classic/creative/fusion" }
  ],
  "storageTips": ["tip for extending freshness"],
  "priorityUse": ["item to use first", "second priority"]
}

Be creative but practical. Reply with valid JSON only, no other text."""

SCAN_PROMPTS = {
    "identify": IDENTIFY_PROMPT,
    "budget": BUDGET_PROMPT,
    "leftovers": LEFTOVERS_PROMPT,
}

DEFAULT_MODE = "identify"
