# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - Email/password registration and login (auth.users table)
# - Google and Apple OAuth sign-in
# - JWT token generation and validation

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.sign_in_with_oauth() - Build provider authorization URL (google, apple)
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

Signed-in users are identified by their auth.users id. Clients that never
sign in send a browser-generated UUID in the x-user-id header instead; every
table row stores whichever id the request carried in its user_id column.
"""
