"""
Domain packages - one per resource.

Each package follows the same layout:
- schemas.py  request bodies (Pydantic)
- service.py  business rules over the document store
- router.py   FastAPI endpoints; authorization happens here
"""
