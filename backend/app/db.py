"""
Supabase clients and table names for the admin API.

  supabase        anon key: password sign-in, token verification
  supabase_admin  service role (bypasses RLS): dashboard reads/writes,
                  role lookups, session revocation; None when
                  SUPABASE_SERVICE_KEY is unset

The send-email function never imports this module, so it runs without any
Supabase configuration.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from supabase import Client, create_client

load_dotenv()

SUBMISSIONS_TABLE = "form_submissions"
PROFILES_TABLE = "profiles"
USER_ROLES_TABLE = "user_roles"

DASHBOARD_TABLES = (SUBMISSIONS_TABLE, PROFILES_TABLE, USER_ROLES_TABLE)

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY")

if not SUPABASE_URL or not SUPABASE_KEY:
    raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")


def _connect(key: Optional[str]) -> Optional[Client]:
    if not key:
        return None
    return create_client(SUPABASE_URL, key)


supabase: Client = _connect(SUPABASE_KEY)
supabase_admin: Optional[Client] = _connect(SUPABASE_SERVICE_KEY)
