"""
Administrative HTTP API over a Supabase project.

Two collaborators back every route:
- the Supabase auth-admin / RPC endpoints, called with the service-role key
- a pooled direct Postgres connection for literal SQL

Run with `python -m supabase_admin_api`.
"""

__version__ = "0.1.0"
