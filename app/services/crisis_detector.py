# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Layered crisis detection over a single check-in.

Three independent layers produce a verdict each:
  * text    - ordered regex tiers over the journal text, gated by a negation set
  * metrics - threshold score over the six scales
  * pattern - a run of low-mood days in the recent history

`detect` combines them. Everything here is pure: no database, no clock,
no logging of the journal text.
"""

import re
from typing import Iterable, List, Optional, Sequence

from app.schemas.checkin_schemas import CheckinMetrics
from app.schemas.crisis_schemas import (
    CrisisDetectionResult,
    CrisisSeverity,
    CrisisTriggerType,
)

LOW_MOOD_PATTERN_DAYS = 3
LOW_MOOD_PATTERN_THRESHOLD = 3

METHOD_NO_TEXT = "no_text"
METHOD_NEGATION = "negation_detected"
METHOD_TEXT = "text_pattern"
METHOD_METRICS = "metric_threshold"
METHOD_PATTERN = "consecutive_low_mood"
METHOD_COMBINED = "text_and_metrics"
METHOD_NONE = "none"

_FLAGS = re.IGNORECASE

# 🚫 Checked before any tier; one hit silences the text layer
NEGATION_PATTERNS = [
    re.compile(r"\b(don'?t|do\s+not|never|no\s+longer)\s+want\s+to\s+(die|kill|hurt)", _FLAGS),
    re.compile(r"\bnot\s+(suicidal|thinking\s+about\s+suicide)", _FLAGS),
    re.compile(r"\b(glad|happy|grateful)\s+.*\s+(alive|here|living)", _FLAGS),
    re.compile(r"\bused\s+to\s+(feel|think|want)", _FLAGS),
    re.compile(r"\bif\s+I\s+(ever|was|were)", _FLAGS),
]

# 🔴 Explicit intent / suicidal ideation
HIGH_SEVERITY_PATTERNS = [
    re.compile(r"\b(want|going|plan|planning|decided)\s+to\s+(kill|end|hurt)\s+(myself|my\s*self|my\s+life)", _FLAGS),
    re.compile(r"\b(suicide|suicidal)\b", _FLAGS),
    re.compile(r"\bend\s+(it\s+all|my\s+life|everything)\b", _FLAGS),
    re.compile(r"\bcan'?t\s+go\s+on\b", _FLAGS),
    re.compile(r"\bno\s+(reason|point)\s+(to\s+live|in\s+living)", _FLAGS),
]

# 🟠 Hopelessness / inability to cope
MEDIUM_SEVERITY_PATTERNS = [
    re.compile(r"\bwish\s+I\s+(wasn'?t|were\s+not)\s+(here|alive|born)", _FLAGS),
    re.compile(r"\b(everyone|world)\s+.*\s+better\s+(off|without)\s+.*\s+me\b", _FLAGS),
    re.compile(r"\bcan'?t\s+take\s+(it|this)\s+anymore\b", _FLAGS),
    re.compile(r"\bfeeling\s+(hopeless|worthless|empty)\b", _FLAGS),
]

# 🟡 General distress
LOW_SEVERITY_PATTERNS = [
    re.compile(r"\b(self[- ]?harm|hurting\s+myself)\b", _FLAGS),
    re.compile(r"\bgiving\s+up\b", _FLAGS),
    re.compile(r"\bno\s+hope\b", _FLAGS),
]

SEVERITY_TIERS = [
    (CrisisSeverity.high, HIGH_SEVERITY_PATTERNS, "Contains high-severity crisis language"),
    (CrisisSeverity.medium, MEDIUM_SEVERITY_PATTERNS, "Expresses hopelessness or inability to cope"),
    (CrisisSeverity.low, LOW_SEVERITY_PATTERNS, "Concerning language detected"),
]


def _normalize(text: str) -> str:
    return text.replace("’", "'").replace("‘", "'").lower()


def _is_negated(text: str) -> bool:
    return any(p.search(text) for p in NEGATION_PATTERNS)


def detect_crisis_from_text(text: Optional[str]) -> CrisisDetectionResult:
    if not text or not text.strip():
        return CrisisDetectionResult.not_detected(METHOD_NO_TEXT)

    normalized = _normalize(text)

    if _is_negated(normalized):
        return CrisisDetectionResult.not_detected(METHOD_NEGATION)

    for severity, patterns, factor in SEVERITY_TIERS:
        if any(p.search(normalized) for p in patterns):
            return CrisisDetectionResult(
                detected=True,
                severity=severity,
                trigger_type=CrisisTriggerType.keyword,
                detection_method=METHOD_TEXT,
                risk_factors=[factor],
            )

    return CrisisDetectionResult.not_detected(METHOD_TEXT)


def score_metrics(metrics: CheckinMetrics):
    """Return (score, risk_factors) for one day's scales."""
    score = 0
    factors: List[str] = []

    if metrics.mood <= 2:
        score += 3
        factors.append("Very low mood rating")
    elif metrics.mood <= 4:
        score += 1
        factors.append("Low mood rating")

    if metrics.stress >= 9:
        score += 2
        factors.append("Extremely high stress")
    elif metrics.stress >= 7:
        score += 1
        factors.append("High stress level")

    if metrics.anxiety >= 8:
        score += 2
        factors.append("Very high anxiety")
    elif metrics.anxiety >= 6:
        score += 1
        factors.append("Elevated anxiety")

    if metrics.sleep <= 2:
        score += 1
        factors.append("Severely poor sleep")

    if metrics.energy <= 2:
        score += 1
        factors.append("Very low energy")

    if metrics.mood <= 3 and metrics.stress >= 8:
        score += 2
        factors.append("Combination of low mood and high stress")

    if metrics.mood <= 3 and metrics.energy <= 3 and metrics.sleep <= 3:
        score += 2
        factors.append("Multiple areas of concern")

    return score, factors


def severity_for_score(score: int) -> Optional[CrisisSeverity]:
    if score >= 6:
        return CrisisSeverity.high
    if score >= 4:
        return CrisisSeverity.medium
    if score >= 2:
        return CrisisSeverity.low
    return None


def detect_crisis_from_metrics(metrics: CheckinMetrics) -> CrisisDetectionResult:
    score, factors = score_metrics(metrics)
    severity = severity_for_score(score)

    if severity is None:
        return CrisisDetectionResult(
            detected=False,
            detection_method=METHOD_METRICS,
            risk_factors=factors,
        )

    return CrisisDetectionResult(
        detected=True,
        severity=severity,
        trigger_type=CrisisTriggerType.metric_pattern,
        detection_method=METHOD_METRICS,
        risk_factors=factors,
    )


def detect_low_mood_pattern(recent_history: Sequence) -> CrisisDetectionResult:
    """
    `recent_history` is most recent first and includes today's check-in.
    Fewer than three records is not enough to call a pattern.
    """
    window = list(recent_history)[:LOW_MOOD_PATTERN_DAYS]
    if len(window) < LOW_MOOD_PATTERN_DAYS:
        return CrisisDetectionResult.not_detected(METHOD_PATTERN)

    if all(record.mood <= LOW_MOOD_PATTERN_THRESHOLD for record in window):
        return CrisisDetectionResult(
            detected=True,
            severity=CrisisSeverity.medium,
            trigger_type=CrisisTriggerType.consecutive_low,
            detection_method=METHOD_PATTERN,
            risk_factors=[f"Low mood for {LOW_MOOD_PATTERN_DAYS} days in a row"],
        )

    return CrisisDetectionResult.not_detected(METHOD_PATTERN)


def _merge_factors(results: Iterable[CrisisDetectionResult], extra: Optional[str] = None) -> List[str]:
    merged: List[str] = []
    for result in results:
        for factor in result.risk_factors:
            if factor not in merged:
                merged.append(factor)
    if extra and extra not in merged:
        merged.append(extra)
    return merged


def detect(
    text: Optional[str],
    metrics: CheckinMetrics,
    recent_history: Sequence = (),
) -> CrisisDetectionResult:
    """
    Combine the three layers.

    Order of precedence:
      1. text high wins outright
      2. metrics high wins, carrying any text risk factors
      3. text medium plus any metric signal escalates to high
      4. otherwise the most severe remaining signal
         (ties: text, then pattern, then metrics)

    Negation only gates the text layer, so a metrics-confirmed high
    verdict is never overridden by it.
    """
    text_result = detect_crisis_from_text(text)
    if text_result.detected and text_result.severity == CrisisSeverity.high:
        return text_result

    metrics_result = detect_crisis_from_metrics(metrics)
    if metrics_result.detected and metrics_result.severity == CrisisSeverity.high:
        return CrisisDetectionResult(
            detected=True,
            severity=CrisisSeverity.high,
            trigger_type=CrisisTriggerType.metric_pattern,
            detection_method=METHOD_METRICS,
            risk_factors=_merge_factors([metrics_result, text_result]),
        )

    if text_result.detected and text_result.severity == CrisisSeverity.medium and metrics_result.detected:
        return CrisisDetectionResult(
            detected=True,
            severity=CrisisSeverity.high,
            trigger_type=CrisisTriggerType.keyword,
            detection_method=METHOD_COMBINED,
            risk_factors=_merge_factors(
                [text_result, metrics_result],
                extra="Combined text and metric concerns",
            ),
        )

    pattern_result = detect_low_mood_pattern(recent_history)

    # Listed in tie-break order
    fired = [r for r in (text_result, pattern_result, metrics_result) if r.detected]
    if not fired:
        return CrisisDetectionResult.not_detected(METHOD_NONE)

    top_rank = max(r.severity.rank for r in fired)
    winner = next(r for r in fired if r.severity.rank == top_rank)

    return CrisisDetectionResult(
        detected=True,
        severity=winner.severity,
        trigger_type=winner.trigger_type,
        detection_method=winner.detection_method,
        risk_factors=_merge_factors([winner] + [r for r in fired if r is not winner]),
    )
