"""
Core request semantics, independent of HTTP framework and storage service.

- cache_control: ordered extension -> max-age rules
- objects: object key and content type derivation
"""

from .cache_control import CacheControlRules, Rule, RuleDecodeError, path_extension
from .objects import content_type_for, object_key

__all__ = [
    "CacheControlRules",
    "Rule",
    "RuleDecodeError",
    "content_type_for",
    "object_key",
    "path_extension",
]
