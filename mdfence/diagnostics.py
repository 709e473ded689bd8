"""
Diagnostic models - Analyzer messages, fixes and suggestions

JSON-friendly dataclasses for what the host analyzer reports against a
fragment. ``from_dict`` accepts both snake_case keys and the camelCase keys
used by JavaScript-style linters (``endLine``, ``ruleId``...) and remembers
which spelling it saw, so ``to_dict`` writes each key back the way it came
in. Any field it does not know is kept in ``extra`` and written back too.

Location fields are stored as given: a diagnostic whose ``line`` is not an
integer is treated as location-less by the translator.

Author: mdfence maintainers | 2026-10-19
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


_ALIASES = {
    "endLine": "end_line",
    "endColumn": "end_column",
    "ruleId": "rule_id",
}

_DIAGNOSTIC_KEYS = (
    "message", "rule_id", "severity", "line", "column", "end_line", "end_column",
)


@dataclass(frozen=True)
class Fix:
    """Replace ``range`` (``[start, end)`` offsets) with ``text``."""
    range: Tuple[int, int]
    text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"range": [self.range[0], self.range[1]], "text": self.text}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Fix":
        start, end = d["range"]
        return cls(range=(start, end), text=d.get("text", ""))


@dataclass(frozen=True)
class Suggestion:
    """An optional fix offered alongside a diagnostic."""
    fix: Fix
    desc: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.extra)
        result["desc"] = self.desc
        result["fix"] = self.fix.to_dict()
        return result

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Suggestion":
        extra = {k: v for k, v in d.items() if k not in ("desc", "fix")}
        return cls(fix=Fix.from_dict(d["fix"]), desc=d.get("desc", ""), extra=extra)


@dataclass(frozen=True)
class Diagnostic:
    """A message reported by the analyzer."""
    message: str = ""
    rule_id: Optional[str] = None
    severity: Optional[int] = None
    line: Optional[int] = None
    column: Optional[int] = None
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    fix: Optional[Fix] = None
    suggestions: Optional[List[Suggestion]] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    key_names: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    @property
    def has_location(self) -> bool:
        return is_int(self.line)

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.extra)
        for key in _DIAGNOSTIC_KEYS:
            value = getattr(self, key)
            if value is not None:
                result[self.key_names.get(key, key)] = value
        if self.fix is not None:
            result["fix"] = self.fix.to_dict()
        if self.suggestions is not None:
            result["suggestions"] = [s.to_dict() for s in self.suggestions]
        return result

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Diagnostic":
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        key_names: Dict[str, str] = {}
        for key, value in d.items():
            name = _ALIASES.get(key, key)
            if name in _DIAGNOSTIC_KEYS:
                values[name] = value
                if name != key:
                    key_names[name] = key
            elif name == "fix":
                values["fix"] = Fix.from_dict(value) if value is not None else None
            elif name == "suggestions" and isinstance(value, list):
                values["suggestions"] = [Suggestion.from_dict(s) for s in value]
            else:
                extra[key] = value
        if values.get("message") is None:
            values["message"] = ""
        return cls(extra=extra, key_names=key_names, **values)


def is_int(value: Any) -> bool:
    """Integer check that rejects booleans."""
    return isinstance(value, int) and not isinstance(value, bool)


def as_diagnostic(item: Any) -> Diagnostic:
    """Accept a Diagnostic or a plain dict."""
    if isinstance(item, Diagnostic):
        return item
    if isinstance(item, dict):
        return Diagnostic.from_dict(item)
    raise TypeError(f"Expected Diagnostic or dict, got {type(item).__name__}")
