# Supabase table: meal_plans
# One row per filled slot of the weekly calendar.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: text (not null)
- day: text (not null) - monday..sunday
- meal_type: text (not null) - breakfast, lunch, dinner, snack
- meal_name: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique (user_id, day, meal_type)
"""
