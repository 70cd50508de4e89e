#!/usr/bin/env python3
import sys
import os

print("Running preflight import check...")
try:
    # Set dummy env vars to avoid KeyErrors during config load if any
    os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

    import rapport.main
    print("Import rapport.main: OK")

    from rapport.api.routes import ROUTES
    from rapport.api.admin_routes import ADMIN_ROUTES
    print(f"Route table: {len(ROUTES) + len(ADMIN_ROUTES)} entries")

    print("Preflight check passed.")
    sys.exit(0)
except Exception as e:
    print(f"Preflight check FAILED: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)
