"""
Infrastructure layer - external service integrations.

- storage: Object storage (S3-compatible, MediaStore)
"""
