# Supabase table: custom_recipes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default gen_random_uuid())
- user_id: text (not null) - auth user id or anonymous browser id
- name: text (not null)
- description: text (nullable)
- image_url: text (nullable)
- prep_time: text (nullable) - free text, e.g. "15 min"
- cook_time: text (nullable)
- servings: integer (default 4)
- calories: integer (nullable)
- difficulty: text (default 'Medium') - values: Easy, Medium, Hard
- tags: text[] (default '{}')
- ingredients: jsonb (default '[]') - [{"item": "...", "amount": "...", "calories": 120}]
- prep_steps: jsonb (default '[]')
- cooking_steps: jsonb (default '[]')
- nutrition: jsonb (default '{}') - {"protein": .., "carbs": .., "fat": .., "fiber": ..}
- is_public: boolean (default false)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
