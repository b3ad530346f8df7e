"""FastAPI service proxying the Holiday API.

This package provides the REST endpoints the holiday finder client
calls. The upstream API key stays inside this service.
"""

__version__ = "1.0.0"
