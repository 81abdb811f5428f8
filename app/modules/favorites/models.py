# Supabase table: favorites
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: text (not null)
- recipe_name: text (not null)
- recipe_type: text (not null, default 'builtin') - values: builtin, custom
- custom_recipe_id: uuid (foreign key to custom_recipes.id, nullable)
- notes: text (nullable)
- rating: integer (nullable, 1..5)
- created_at: timestamp (default: now())
- unique (user_id, recipe_name, recipe_type)
"""
