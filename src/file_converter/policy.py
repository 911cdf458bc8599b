"""Allow/forbid rules deciding which category -> target conversions make sense."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from .categories import Category

FALLBACK_SUGGESTION = "txt, json"


@dataclass(frozen=True)
class ConversionRule:
    allowed: frozenset[str] = frozenset()
    forbidden: frozenset[str] = frozenset()
    # Declaration order of ``allowed``, kept for human-readable suggestions.
    allowed_order: tuple[str, ...] = ()

    @classmethod
    def of(cls, allowed: Iterable[str] = (), forbidden: Iterable[str] = ()) -> "ConversionRule":
        ordered = tuple(dict.fromkeys(fmt.lower() for fmt in allowed))
        return cls(
            allowed=frozenset(ordered),
            forbidden=frozenset(fmt.lower() for fmt in forbidden),
            allowed_order=ordered,
        )


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    suggestion: Optional[str] = None


DEFAULT_RULES: Dict[Category, ConversionRule] = {
    Category.IMAGE: ConversionRule.of(
        allowed=("jpg", "jpeg", "png", "webp", "gif", "bmp", "tiff", "svg", "ico", "pdf"),
        forbidden=("json", "xml", "yaml", "csv", "xlsx", "txt", "docx", "mp3", "mp4"),
    ),
    Category.DOCUMENT: ConversionRule.of(
        allowed=("pdf", "docx", "txt", "html", "md", "json", "xml", "yaml"),
        forbidden=("jpg", "png", "mp3", "mp4", "xlsx", "csv"),
    ),
    Category.SPREADSHEET: ConversionRule.of(
        allowed=("xlsx", "csv", "json", "xml", "yaml", "txt", "html", "pdf"),
        forbidden=("jpg", "png", "mp3", "mp4", "docx"),
    ),
    Category.DATA: ConversionRule.of(
        allowed=("json", "xml", "yaml", "csv", "tsv", "txt", "html"),
        forbidden=("jpg", "png", "mp3", "mp4", "docx", "pdf"),
    ),
    Category.CODE: ConversionRule.of(
        allowed=("txt", "html", "json", "xml", "pdf"),
        forbidden=("jpg", "png", "mp3", "mp4", "xlsx", "csv"),
    ),
    Category.AUDIO: ConversionRule.of(
        allowed=("txt", "json", "xml"),
        forbidden=("jpg", "png", "pdf", "docx", "xlsx", "csv"),
    ),
    Category.VIDEO: ConversionRule.of(
        allowed=("txt", "json", "xml"),
        forbidden=("jpg", "png", "pdf", "docx", "xlsx", "csv"),
    ),
}


class RulesTable:
    """Evaluates targets forbidden-first, then against the allowed list.

    Categories without a rule entry are fail-open: every target is allowed.
    """

    def __init__(self, rules: Mapping[Category, ConversionRule] | None = None) -> None:
        self._rules: Dict[Category, ConversionRule] = dict(DEFAULT_RULES if rules is None else rules)

    def rule_for(self, category: Category) -> Optional[ConversionRule]:
        return self._rules.get(category)

    def is_allowed(self, category: Category, target: str) -> bool:
        rule = self._rules.get(category)
        if rule is None:
            return True
        target = target.lower()
        if target in rule.forbidden:
            return False
        if rule.allowed and target not in rule.allowed:
            return False
        return True

    def suggestion(self, category: Category) -> str:
        rule = self._rules.get(category)
        names = (rule.allowed_order or tuple(sorted(rule.allowed))) if rule else ()
        allowed = ", ".join(names) if names else FALLBACK_SUGGESTION
        return f"Try converting to one of these formats: {allowed}"

    def evaluate(self, category: Category, target: str) -> PolicyDecision:
        if self.is_allowed(category, target):
            return PolicyDecision(allowed=True)
        return PolicyDecision(allowed=False, suggestion=self.suggestion(category))

    def describe(self) -> Dict[str, Dict[str, list[str]]]:
        return {
            category.value: {
                "allowed": list(rule.allowed_order or sorted(rule.allowed)),
                "forbidden": sorted(rule.forbidden),
            }
            for category, rule in self._rules.items()
        }


DEFAULT_POLICY = RulesTable()


def evaluate(category: Category, target: str) -> PolicyDecision:
    return DEFAULT_POLICY.evaluate(category, target)


__all__ = [
    "ConversionRule",
    "DEFAULT_POLICY",
    "DEFAULT_RULES",
    "PolicyDecision",
    "RulesTable",
    "evaluate",
]
