"""
Upload Proxy - an HTTP front-end for object storage uploads.

This package contains the complete application:
- core: Cache-control rules and object key derivation
- infrastructure: Object store backends (S3, MediaStore)
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
