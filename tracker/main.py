"""
tracker/main.py
Always-on server entry point: `uvicorn tracker.main:app`.
"""
from tracker.api.app import create_app

app = create_app()
