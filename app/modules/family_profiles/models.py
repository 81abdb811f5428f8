# Supabase table: family_profiles
# One row per user; members are embedded as a JSON array.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: text (not null, unique)
- family_name: text (default 'My Family')
- members: jsonb (default '[]') - [{"id", "name", "role", "allergies", "restrictions", "likes", "dislikes", "notes"}]
- skill_level: text (default 'intermediate') - values: beginner, intermediate, advanced
- preferences: jsonb (default '{}') - {"cuisine_types", "meal_prep_style", "budget_level", "organic_preference"}
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
