"""
API and domain schemas.

Pydantic models shared by the HTTP layer and the services.
"""
