"""
API Endpoints

Routers mounted under /api/v1 (health at the root).
"""
