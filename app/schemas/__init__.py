"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: SQLAlchemy tables (app.models)
- Schemas: API contract (what client sends/receives)

All schemas live in app.schemas.schemas.
"""
