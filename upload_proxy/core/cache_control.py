"""
Cache-control rules for uploaded objects.

A rule maps one file extension to one cache duration. Rules are kept in
declaration order and the first rule whose extension matches wins, so
operators can put the most specific policy first.

Matching is deliberately literal: case-sensitive, exact on the last
extension of the final path segment (".tar.gz" is seen as ".gz").
"""

import json
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional


class RuleDecodeError(ValueError):
    """Raised when the cache-control rule JSON cannot be decoded."""
    pass


def path_extension(path: str) -> str:
    """
    Return the extension of the final segment of ``path``, dot included.

    Returns an empty string when the final segment has no dot.
    """
    segment = path.rpartition("/")[2]
    dot = segment.rfind(".")
    if dot < 0:
        return ""
    return segment[dot:]


@dataclass(frozen=True)
class Rule:
    """
    One extension -> max-age mapping.

    Frozen because rules are loaded once at startup and shared by every
    request handler.
    """
    extension: str
    max_age: int

    def __post_init__(self) -> None:
        if not isinstance(self.extension, str):
            raise ValueError("extension must be a string")
        # bool is an int subclass, but true/false is never a duration
        if isinstance(self.max_age, bool) or not isinstance(self.max_age, int):
            raise ValueError("max_age must be an integer")
        if self.max_age < 0:
            raise ValueError("max_age cannot be negative")

    @classmethod
    def from_dict(cls, data: Any) -> "Rule":
        """Build a rule from its JSON form: {"ext": ".mp4", "maxAge": 60}."""
        if not isinstance(data, dict):
            raise ValueError(f"rule must be an object, got {type(data).__name__}")
        missing = [key for key in ("ext", "maxAge") if key not in data]
        if missing:
            raise ValueError(f"rule is missing {', '.join(missing)}")
        return cls(extension=data["ext"], max_age=data["maxAge"])

    @property
    def header_value(self) -> str:
        return f"max-age={self.max_age}"


class CacheControlRules:
    """
    Ordered, read-only collection of cache-control rules.

    The rules are copied into a tuple on construction, so an instance can
    be shared across threads without locking.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)

    @classmethod
    def from_json(cls, raw: str) -> "CacheControlRules":
        """
        Decode rules from a JSON array.

        Either every element decodes or the whole input is rejected with
        RuleDecodeError; a partially populated rule set is never returned.
        Blank input yields an empty rule set.
        """
        if not raw.strip():
            return cls()

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RuleDecodeError(f"invalid cache-control rules JSON: {e}") from e

        return cls.from_json_value(payload)

    @classmethod
    def from_json_value(cls, payload: Any) -> "CacheControlRules":
        """Build rules from an already-decoded JSON value."""
        if not isinstance(payload, list):
            raise RuleDecodeError("cache-control rules must be a JSON array")

        rules = []
        for index, item in enumerate(payload):
            try:
                rules.append(Rule.from_dict(item))
            except ValueError as e:
                raise RuleDecodeError(f"invalid cache-control rule #{index}: {e}") from e

        return cls(rules)

    def match(self, path: str) -> Optional[Rule]:
        """Return the first rule matching the extension of ``path``."""
        extension = path_extension(path)
        for rule in self._rules:
            if rule.extension == extension:
                return rule
        return None

    def header_value(self, path: str) -> Optional[str]:
        """
        Cache-Control header value for ``path``.

        None means "do not set a Cache-Control header"; it is never an
        empty string.
        """
        rule = self.match(path)
        if rule is None:
            return None
        return rule.header_value

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CacheControlRules):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self._rules)

    def __repr__(self) -> str:
        return f"CacheControlRules({list(self._rules)!r})"
