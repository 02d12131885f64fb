import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from .errors import CatalogUnavailable
from .feature_extractors import contains_any, normalise
from .models import (
    AdvisoryResult,
    Priority,
    PriorityAssessment,
    ScenarioMetadata,
    ScoredCandidate,
    TypologyRule,
)

logger = logging.getLogger(__name__)

# Scoring weights
DOMAIN_WEIGHT = 2
PRODUCT_WEIGHT = 2
COUNTRY_WEIGHT = 1
KEYWORD_WEIGHT = 1
CROSS_BORDER_WEIGHT = 1

TOP_N = 3
GLOBAL = "GLOBAL"
AFFIRMATIVE = "Yes"
CROSS_BORDER_PHRASE = "cross border"
ESCALATION_PHRASES: Tuple[str, ...] = ("high value", "large amount", "multiple banks")

FALLBACK_TYPOLOGY = (
    "No strong typology match found – treat as generic suspicious behaviour "
    "and investigate manually."
)
FALLBACK_CHECK = "Clarify customer profile, transaction purpose, and counterparties in more detail."
ESCALATION_REASON = "Scenario text suggests high value or multi-bank exposure."


def load_catalog(path: str) -> Tuple[TypologyRule, ...]:
    """Read a typology catalog from a YAML or JSON file.

    The document is either a list of rules or a mapping with a
    ``typologies`` list.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise CatalogUnavailable(f"Failed to load typologies from {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("typologies")
    if data is None:
        data = []
    if not isinstance(data, list):
        raise CatalogUnavailable(f"Typology catalog {path} must be a list of rules")

    rules: List[TypologyRule] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            logger.warning("Skipping catalog entry %d in %s: not a mapping", i, path)
            continue
        try:
            rules.append(TypologyRule.model_validate(entry))
        except ValidationError as e:
            raise CatalogUnavailable(f"Invalid typology at index {i} in {path}: {e}") from e

    logger.info("Loaded %d typologies from %s", len(rules), path)
    return tuple(rules)


def score_rule(rule: TypologyRule, meta: ScenarioMetadata, scenario: str) -> int:
    score = 0
    text = normalise(scenario)

    if meta.domain in rule.domains:
        score += DOMAIN_WEIGHT
    if meta.product in rule.products:
        score += PRODUCT_WEIGHT
    if meta.country in rule.countries or GLOBAL in rule.countries:
        score += COUNTRY_WEIGHT

    score += KEYWORD_WEIGHT * len(contains_any(text, rule.keywords_any))

    if meta.cross_border == AFFIRMATIVE and CROSS_BORDER_PHRASE in text:
        score += CROSS_BORDER_WEIGHT

    return score


def _escalate(current: Priority, base: Optional[Priority]) -> Priority:
    if base is Priority.HIGH:
        return Priority.HIGH
    if base is Priority.MEDIUM and current is Priority.LOW:
        return Priority.MEDIUM
    return current


class RuleEngine:
    """Ranks typology rules against a scenario and merges the best matches.

    The catalog is injected and never mutated, so one engine can serve
    concurrent callers.
    """

    def __init__(self, rules: Iterable[TypologyRule] = ()):
        self.rules: Tuple[TypologyRule, ...] = tuple(rules)

    @classmethod
    def from_path(cls, path: str) -> "RuleEngine":
        return cls(load_catalog(path))

    def rank(self, meta: ScenarioMetadata, scenario: str) -> List[ScoredCandidate]:
        scored: List[ScoredCandidate] = []
        for rule in self.rules:
            s = score_rule(rule, meta, scenario)
            if s > 0:
                scored.append(ScoredCandidate(rule=rule, score=s))
        # sorted() is stable, ties keep catalog order
        return sorted(scored, key=lambda c: c.score, reverse=True)

    def analyse(self, meta: ScenarioMetadata, scenario: str) -> AdvisoryResult:
        if not (scenario or "").strip():
            return self._fallback(meta)

        top = self.rank(meta, scenario)[:TOP_N]
        if not top:
            return self._fallback(meta)

        typologies: List[str] = []
        # dicts keep first-appearance order and drop duplicates
        red_flags: Dict[str, None] = {}
        checks: Dict[str, None] = {}
        angles: Dict[str, None] = {}
        pitfalls: Dict[str, None] = {}
        notes: Dict[str, None] = {}
        priority = Priority.LOW
        reasons: List[str] = []

        for cand in top:
            rule = cand.rule
            typologies.append(rule.name)
            red_flags.update(dict.fromkeys(rule.red_flags))
            checks.update(dict.fromkeys(rule.recommended_checks))
            angles.update(dict.fromkeys(rule.sar_str_angles))
            pitfalls.update(dict.fromkeys(rule.pitfalls))

            note = rule.country_notes.get(meta.country) or rule.country_notes.get(GLOBAL)
            if note:
                notes[note] = None

            reasons.append(f"{rule.name} matched with score {cand.score}.")
            priority = _escalate(priority, rule.base_priority)
            logger.debug("Matched %r with score %d", rule.name, cand.score)

        if contains_any(scenario, ESCALATION_PHRASES):
            priority = Priority.HIGH
            reasons.append(ESCALATION_REASON)

        return AdvisoryResult(
            meta=meta,
            likely_typologies=tuple(typologies),
            red_flags=tuple(red_flags),
            recommended_checks=tuple(checks),
            sar_str_angles=tuple(angles),
            priority_assessment=PriorityAssessment(level=priority, rationale=" ".join(reasons)),
            country_notes=tuple(notes),
            pitfalls_to_avoid=tuple(pitfalls),
        )

    def _fallback(self, meta: ScenarioMetadata) -> AdvisoryResult:
        return AdvisoryResult(
            meta=meta,
            likely_typologies=(FALLBACK_TYPOLOGY,),
            recommended_checks=(FALLBACK_CHECK,),
        )

    def catalog(self) -> List[Dict[str, Any]]:
        return [r.model_dump(mode="json") for r in self.rules]
