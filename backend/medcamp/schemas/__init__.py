"""
MedCamp Backend — Pydantic Request/Response Schemas
=====================================================

What:  The API contract between the frontend and the backend.
How:   Field names are snake_case internally (matching store documents);
       wire names follow the existing frontend (camelCase for registration,
       payment and analytics fields) through aliases. Request bodies accept
       either spelling; responses are serialized by alias.
"""
