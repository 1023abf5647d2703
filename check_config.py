#!/usr/bin/env python3
"""
Verify Supabase configuration for FitTrack.
Run this script to check that credentials are set and every table the app
reads from is reachable.
"""

import sys

from fittrack import config
from fittrack.errors import StoreError
from fittrack.models import ENTITY_KINDS
from fittrack.store import SupabaseStore, connect_supabase


def check_supabase_config() -> bool:
    """Check credentials, client creation and each tracked table."""
    print("🔍 Testing Supabase Configuration...")
    print("=" * 50)

    if not config.SUPABASE_AVAILABLE:
        print("❌ Supabase credentials not found")
        print("💡 Set SUPABASE_URL and SUPABASE_ANON_KEY in the environment or in .streamlit/secrets.toml:")
        print("   SUPABASE_URL = 'your-project-url'")
        print("   SUPABASE_ANON_KEY = 'your-anon-key'")
        return False
    print("✅ Credentials found")

    try:
        store = SupabaseStore(connect_supabase(config.SUPABASE_URL, config.SUPABASE_ANON_KEY))
        print("✅ Supabase client created successfully")
    except Exception as e:
        print(f"❌ Failed to create Supabase client: {e}")
        return False

    ok = True
    for kind in ENTITY_KINDS.values():
        try:
            store.collection(kind.table).list(limit=1)
            print(f"✅ Table '{kind.table}' reachable")
        except StoreError as e:
            print(f"❌ Table '{kind.table}' failed: {e}")
            ok = False

    if not ok:
        print("\n💡 Make sure the workouts, body_weight, water_intake, sleep_tracker and goals tables exist")
        print("   and that row level security lets signed-in users read their own rows.")
    return ok


if __name__ == "__main__":
    config.setup_logging()
    if check_supabase_config():
        print("\n✅ Configuration test completed successfully!")
    else:
        print("\n❌ Configuration test failed. Please fix the issues above.")
        sys.exit(1)
