#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Serves the booking API with auto-reload against whatever DATABASE_URL the
environment (or backend/.env) points at; SQLite by default.
"""
import os
from pathlib import Path

import uvicorn

backend_dir = Path(__file__).parent
os.chdir(backend_dir)

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting studio booking API on http://localhost:{port}")
    print(f"API docs: http://localhost:{port}/docs")

    uvicorn.run(
        "studio_booking.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info",
    )
