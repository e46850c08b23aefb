"""API-specific request/response models.

Modules:
- common: error bodies and request validation formatting
- checkout: checkout, webhook and catalog response bodies
"""

__all__: list[str] = []
