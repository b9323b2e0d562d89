"""
Night Shift dashboard backend package.

This module marks the 'src.api' directory as a Python package. The FastAPI
app lives in src.api.main (app, or create_app() for a custom storage).
"""
