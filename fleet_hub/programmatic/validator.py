"""
Content quality validator.

Scores generated pages before they are published at scale: length,
uniqueness, readability, keyword density, structure, near-duplicates,
keyword stuffing and thin sections.
"""

import logging
import re
from typing import Literal, NotRequired, TypedDict

from fleet_hub.programmatic.content_generator import (
    average_density,
    calculate_readability_score,
    calculate_similarity,
)
from fleet_hub.programmatic.types import ContentSection, GeneratedContent, ProgrammaticEntity
from fleet_hub.utils.text import word_count

logger = logging.getLogger(__name__)

Severity = Literal["critical", "high", "medium", "low"]

QUALITY_THRESHOLDS = {
    "min_word_count": 500,
    "ideal_word_count": 800,
    "max_word_count": 3000,
    "min_uniqueness": 70,
    "min_readability": 40,
    "ideal_readability": 60,
    "min_keyword_density": 0.005,
    "max_keyword_density": 0.03,
    "ideal_keyword_density": 0.015,
    "min_sections": 4,
    "min_faqs": 3,
    "min_internal_links": 3,
    "max_similarity": 0.3,
}

_SEVERITY_PENALTY = {"critical": 25, "high": 15, "medium": 10, "low": 5}

_MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_HTML_LINK_RE = re.compile(r'<a\s+href="([^"]+)"')
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


class ValidationIssue(TypedDict):
    severity: Severity
    type: str
    message: str
    fix: NotRequired[str]


class ValidationWarning(TypedDict):
    type: str
    message: str
    suggestion: NotRequired[str]


class QualityMetrics(TypedDict):
    word_count: int
    uniqueness_score: float
    readability_score: float
    keyword_density: dict[str, float]
    average_keyword_density: float
    section_count: int
    faq_count: int
    internal_link_count: int


class ValidationResult(TypedDict):
    valid: bool
    score: int
    issues: list[ValidationIssue]
    warnings: list[ValidationWarning]
    metrics: QualityMetrics
    entity_id: NotRequired[str]


def _all_text(content: GeneratedContent) -> str:
    return " ".join(s["content"] for s in content["sections"])


def count_internal_links(text: str) -> int:
    return len(_MARKDOWN_LINK_RE.findall(text)) + len(_HTML_LINK_RE.findall(text))


def validate_content(
    content: GeneratedContent,
    entity: ProgrammaticEntity,
    strict_mode: bool = False,
    check_similarity: bool = False,
    existing_content: list[str] | None = None,
) -> ValidationResult:
    """Validate one page. ``valid`` means no critical or high severity issue."""
    existing_content = existing_content or []
    issues: list[ValidationIssue] = []
    warnings: list[ValidationWarning] = []

    text = _all_text(content)
    density = dict(content.get("keyword_density") or {})
    metrics = QualityMetrics(
        word_count=content.get("word_count") or word_count(text),
        uniqueness_score=content.get("uniqueness_score") or 100,
        readability_score=content.get("readability_score") or calculate_readability_score(text),
        keyword_density=density,
        average_keyword_density=average_density(density),
        section_count=len(content["sections"]),
        faq_count=sum(1 for s in content["sections"] if s["type"] == "faq" or s["id"] == "faq"),
        internal_link_count=count_internal_links(text),
    )

    _check_word_count(metrics["word_count"], issues, warnings, strict_mode)
    _check_uniqueness(metrics["uniqueness_score"], issues, warnings)
    _check_readability(metrics["readability_score"], issues, warnings)
    _check_keyword_density(metrics["average_keyword_density"], density, issues, warnings, strict_mode)
    _check_structure(metrics, issues, warnings, strict_mode)
    if check_similarity and existing_content:
        _check_similarity(text, existing_content, issues, warnings)
    _check_keyword_stuffing(text, entity.seo.keywords, issues)
    _check_thin_content(content["sections"], warnings)

    return ValidationResult(
        valid=not any(i["severity"] in ("critical", "high") for i in issues),
        score=calculate_overall_score(metrics, issues),
        issues=issues,
        warnings=warnings,
        metrics=metrics,
    )


def _check_word_count(
    count: int,
    issues: list[ValidationIssue],
    warnings: list[ValidationWarning],
    strict_mode: bool,
) -> None:
    t = QUALITY_THRESHOLDS
    if count < t["min_word_count"]:
        issues.append(ValidationIssue(
            severity="critical" if strict_mode else "high",
            type="word-count",
            message=f"Content too short: {count} words (minimum: {t['min_word_count']})",
            fix="Add more detailed information, examples, or expand existing sections",
        ))
    elif count < t["ideal_word_count"]:
        warnings.append(ValidationWarning(
            type="word-count",
            message=f"Content below ideal length: {count} words (ideal: {t['ideal_word_count']})",
            suggestion="Consider adding more details or examples to reach ideal word count",
        ))
    elif count > t["max_word_count"]:
        warnings.append(ValidationWarning(
            type="word-count",
            message=f"Content very long: {count} words (maximum: {t['max_word_count']})",
            suggestion="Consider breaking into multiple pages or removing redundant information",
        ))


def _check_uniqueness(
    score: float,
    issues: list[ValidationIssue],
    warnings: list[ValidationWarning],
) -> None:
    minimum = QUALITY_THRESHOLDS["min_uniqueness"]
    if score < minimum:
        issues.append(ValidationIssue(
            severity="high",
            type="uniqueness",
            message=f"Content not unique enough: {score:g}% (minimum: {minimum}%)",
            fix="Use different template variants or add more entity-specific content",
        ))
    elif score < 85:
        warnings.append(ValidationWarning(
            type="uniqueness",
            message=f"Uniqueness score could be improved: {score:g}%",
            suggestion="Add more unique details or examples specific to this entity",
        ))


def _check_readability(
    score: float,
    issues: list[ValidationIssue],
    warnings: list[ValidationWarning],
) -> None:
    t = QUALITY_THRESHOLDS
    if score < t["min_readability"]:
        issues.append(ValidationIssue(
            severity="medium",
            type="readability",
            message=f"Content too difficult to read: {score:.1f} (minimum: {t['min_readability']})",
            fix="Use shorter sentences, simpler words, and break up long paragraphs",
        ))
    elif score < t["ideal_readability"]:
        warnings.append(ValidationWarning(
            type="readability",
            message=f"Readability below ideal: {score:.1f} (ideal: {t['ideal_readability']})",
            suggestion="Consider simplifying complex sentences for better readability",
        ))


def _check_keyword_density(
    avg: float,
    density: dict[str, float],
    issues: list[ValidationIssue],
    warnings: list[ValidationWarning],
    strict_mode: bool,
) -> None:
    t = QUALITY_THRESHOLDS
    if avg < t["min_keyword_density"]:
        issues.append(ValidationIssue(
            severity="high" if strict_mode else "medium",
            type="keyword-density",
            message=(
                f"Keyword density too low: {avg * 100:.2f}% "
                f"(minimum: {t['min_keyword_density'] * 100:.1f}%)"
            ),
            fix="Naturally incorporate target keywords throughout the content",
        ))
    elif avg > t["max_keyword_density"]:
        issues.append(ValidationIssue(
            severity="high",
            type="keyword-density",
            message=(
                f"Keyword density too high: {avg * 100:.2f}% "
                f"(maximum: {t['max_keyword_density'] * 100:.1f}%)"
            ),
            fix="Reduce keyword usage to avoid appearing spammy to search engines",
        ))
    elif avg < t["ideal_keyword_density"] * 0.7:
        warnings.append(ValidationWarning(
            type="keyword-density",
            message=f"Keyword density below ideal: {avg * 100:.2f}%",
            suggestion="Consider adding keywords naturally in a few more places",
        ))

    # 5% for a single keyword is too much
    for keyword, value in density.items():
        if value > 0.05:
            warnings.append(ValidationWarning(
                type="keyword-overuse",
                message=f'Keyword "{keyword}" used too frequently: {value * 100:.2f}%',
                suggestion="Use synonyms or related terms instead of repeating this keyword",
            ))


def _check_structure(
    metrics: QualityMetrics,
    issues: list[ValidationIssue],
    warnings: list[ValidationWarning],
    strict_mode: bool,
) -> None:
    t = QUALITY_THRESHOLDS
    if metrics["section_count"] < t["min_sections"]:
        issues.append(ValidationIssue(
            severity="high" if strict_mode else "medium",
            type="structure",
            message=f"Too few sections: {metrics['section_count']} (minimum: {t['min_sections']})",
            fix="Add more sections like Benefits, Features, FAQs, or Comparison",
        ))
    if metrics["faq_count"] == 0:
        warnings.append(ValidationWarning(
            type="structure",
            message="No FAQ section found",
            suggestion="Add FAQs to answer common questions and improve SEO",
        ))
    if metrics["internal_link_count"] < t["min_internal_links"]:
        warnings.append(ValidationWarning(
            type="internal-links",
            message=(
                f"Few internal links: {metrics['internal_link_count']} "
                f"(minimum: {t['min_internal_links']})"
            ),
            suggestion="Add more internal links to related pages for better SEO and user experience",
        ))


def _check_similarity(
    text: str,
    existing_content: list[str],
    issues: list[ValidationIssue],
    warnings: list[ValidationWarning],
) -> None:
    for index, other in enumerate(existing_content):
        similarity = calculate_similarity(text, other)
        if similarity > QUALITY_THRESHOLDS["max_similarity"]:
            issues.append(ValidationIssue(
                severity="high",
                type="duplicate",
                message=(
                    f"Content too similar to existing page {index + 1}: "
                    f"{similarity * 100:.1f}% similarity"
                ),
                fix="Use different template variant or add more unique entity-specific content",
            ))
            # first duplicate only
            break
        if similarity > 0.2:
            warnings.append(ValidationWarning(
                type="similarity",
                message=(
                    f"Content somewhat similar to existing page {index + 1}: "
                    f"{similarity * 100:.1f}% similarity"
                ),
                suggestion="Consider adding more unique content to differentiate this page",
            ))


def _check_keyword_stuffing(text: str, keywords: list[str], issues: list[ValidationIssue]) -> None:
    needles = [k.lower() for k in keywords if k]
    for sentence in _SENTENCE_SPLIT_RE.split(text):
        lowered = sentence.lower()
        hits = sum(lowered.count(k) for k in needles)
        if len(sentence.split()) > 5 and hits >= 3:
            issues.append(ValidationIssue(
                severity="medium",
                type="keyword-stuffing",
                message="Potential keyword stuffing detected in sentence",
                fix="Rewrite sentence to use keywords more naturally",
            ))
            break


def _check_thin_content(sections: list[ContentSection], warnings: list[ValidationWarning]) -> None:
    for section in sections:
        count = word_count(section["content"])
        if section["type"] == "text" and count < 50 and section["id"] != "cta":
            warnings.append(ValidationWarning(
                type="thin-content",
                message=f'Section "{section.get("heading") or section["id"]}" is very short: {count} words',
                suggestion="Add more detail to this section or consider merging with another section",
            ))


def calculate_overall_score(metrics: QualityMetrics, issues: list[ValidationIssue]) -> int:
    t = QUALITY_THRESHOLDS
    score = 100 - sum(_SEVERITY_PENALTY.get(i["severity"], 0) for i in issues)

    if metrics["word_count"] >= t["ideal_word_count"]:
        score += 5
    if metrics["uniqueness_score"] >= 90:
        score += 5
    if metrics["readability_score"] >= t["ideal_readability"]:
        score += 5
    ideal = t["ideal_keyword_density"]
    if ideal * 0.8 <= metrics["average_keyword_density"] <= ideal * 1.2:
        score += 5

    return max(0, min(100, score))


def batch_validate(
    pages: list[tuple[GeneratedContent, ProgrammaticEntity]],
    strict_mode: bool = False,
    parallel_limit: int = 10,
) -> list[ValidationResult]:
    """Validate pages in order; each page is checked for similarity against all earlier ones."""
    results: list[ValidationResult] = []
    existing: list[str] = []

    for start in range(0, len(pages), parallel_limit):
        batch = pages[start:start + parallel_limit]
        for content, entity in batch:
            result = validate_content(
                content,
                entity,
                strict_mode=strict_mode,
                check_similarity=True,
                existing_content=existing,
            )
            existing.append(_all_text(content))
            result["entity_id"] = entity.id
            results.append(result)
        logger.debug("Validated %d/%d pages", min(start + parallel_limit, len(pages)), len(pages))

    return results


class ValidationReport(TypedDict):
    summary: dict[str, float]
    issue_breakdown: dict[str, int]
    recommended_actions: list[str]


def generate_validation_report(results: list[ValidationResult]) -> ValidationReport:
    total = len(results)
    valid = sum(1 for r in results if r["valid"])
    invalid = total - valid
    average_score = sum(r["score"] for r in results) / total if total else 0.0

    breakdown: dict[str, int] = {}
    for result in results:
        for issue in result["issues"]:
            breakdown[issue["type"]] = breakdown.get(issue["type"], 0) + 1

    actions: list[str] = []
    if invalid > total * 0.2:
        actions.append(f"{invalid} pages failed validation - review template configurations")

    top_issues = sorted(breakdown.items(), key=lambda kv: kv[1], reverse=True)[:3]
    for issue_type, count in top_issues:
        if count > total * 0.1:
            actions.append(
                f"Common issue: {issue_type} ({count} occurrences) - review content generation logic"
            )

    if average_score < 70:
        actions.append("Average quality score is low - consider improving content templates")

    return ValidationReport(
        summary={"total": total, "valid": valid, "invalid": invalid, "average_score": average_score},
        issue_breakdown=breakdown,
        recommended_actions=actions,
    )
