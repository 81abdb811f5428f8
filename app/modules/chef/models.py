# Supabase table: chef_conversations
# One row per user holding the full assistant transcript.
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: text (not null, unique) - email or UUID
- messages: jsonb (default '[]') - [{"role": "user"|"assistant", "content": "..."}]
- family_profile: jsonb (nullable) - last profile sent with a message; never returned by the API
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
