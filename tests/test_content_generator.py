"""Tests for programmatic section generation and the text metrics."""

import pytest

from fleet_hub.programmatic.content_generator import (
    average_density,
    calculate_keyword_density,
    calculate_readability_score,
    calculate_similarity,
    format_stat_key,
    format_stat_value,
    generate_content,
    generate_content_for,
    generate_faqs,
    validate_generated_content,
)
from fleet_hub.programmatic.types import GenerationContext, Intent, TemplateSection, TemplateVariant
from tests.conftest import make_entity


def _dubai():
    return make_entity(
        entity_type="emirate",
        slug="dubai",
        name="Dubai",
        priority=10,
        metadata={
            "price": {"from": 99},
            "features": ["Free delivery", "Airport pickup", "Salik tags"],
            "stats": {"vehicles_available": 450, "monthly_bookings": 3200},
        },
        benefits=["Free delivery", "24/7 support"],
        keywords=["car rental dubai"],
    )


# ── generate_content ────────────────────────────────────────────────────────

class TestGenerateContent:
    def test_section_order_for_full_entity(self) -> None:
        content = generate_content(_dubai(), [make_entity()], Intent(type="tourism"))
        ids = [s["id"] for s in content["sections"]]
        assert ids == ["hero", "description", "benefits", "features", "stats", "guide", "faq", "cta"]
        assert content["sections"][-1]["order"] == 99

    def test_optional_sections_are_skipped(self) -> None:
        content = generate_content(make_entity(entity_type="emirate", slug="ajman", name="Ajman"))
        ids = [s["id"] for s in content["sections"]]
        assert "features" not in ids
        assert "stats" not in ids

    def test_is_deterministic(self) -> None:
        first = generate_content(_dubai(), [make_entity()], Intent(type="business"))
        second = generate_content(_dubai(), [make_entity()], Intent(type="business"))
        assert first == second

    def test_placeholders_are_filled(self) -> None:
        content = generate_content(_dubai(), [make_entity()], Intent(type="tourism"))
        hero = content["sections"][0]
        assert "SUV" in hero["heading"]
        assert "Dubai" in hero["heading"]
        assert "{location}" not in content["sections"][1]["content"]

    def test_hero_tone_follows_intent(self) -> None:
        family = generate_content(_dubai(), [make_entity()], Intent(type="family"))
        tourism = generate_content(_dubai(), [make_entity()], Intent(type="tourism"))
        assert family["sections"][0]["heading"] == "Your Perfect SUV Awaits in Dubai!"
        assert tourism["sections"][0]["heading"] == "Comprehensive SUV Rental Guide for Dubai"

    def test_variant_without_benefits_drops_section(self) -> None:
        variant = TemplateVariant(id="minimal", sections=[TemplateSection(id="hero", type="hero")])
        content = generate_content(_dubai(), variant=variant)
        assert "benefits" not in [s["id"] for s in content["sections"]]

    def test_word_count_and_metrics(self) -> None:
        content = generate_content(_dubai(), [make_entity()], Intent(type="tourism"))
        assert content["word_count"] == sum(len(s["content"].split()) for s in content["sections"])
        assert set(content["keyword_density"]) == {"car rental dubai"}
        assert 0 <= content["readability_score"] <= 100

    def test_generate_content_for_context(self) -> None:
        context = GenerationContext(primary=_dubai(), secondary=[make_entity()], intent=Intent(type="tourism"))
        assert generate_content_for(context) == generate_content(_dubai(), [make_entity()], Intent(type="tourism"))


# ── FAQs ────────────────────────────────────────────────────────────────────

class TestGenerateFaqs:
    def test_common_questions_mention_entities(self) -> None:
        faqs = generate_faqs(_dubai(), [make_entity()], seed=0)
        assert len(faqs) == 4
        assert faqs[0]["question"] == "What documents do I need to rent a SUV in Dubai?"

    def test_odd_seed_adds_fifth_question(self) -> None:
        assert len(generate_faqs(_dubai(), [], seed=1)) == 5

    def test_entity_faqs_come_first_and_total_is_capped(self) -> None:
        entity = _dubai()
        entity.content.faqs = [{"question": f"Q{i}?", "answer": "A."} for i in range(3)]
        faqs = generate_faqs(entity, [], seed=1)
        assert [f["question"] for f in faqs[:3]] == ["Q0?", "Q1?", "Q2?"]
        assert len(faqs) == 6


# ── Metrics ─────────────────────────────────────────────────────────────────

class TestSimilarity:
    def test_identical_text(self) -> None:
        assert calculate_similarity("rental cars across dubai", "rental cars across dubai") == 1.0

    def test_disjoint_text(self) -> None:
        assert calculate_similarity("rental cars", "desert safari") == 0.0

    def test_short_tokens_are_ignored(self) -> None:
        assert calculate_similarity("a an the", "to of in") == 0.0

    def test_partial_overlap(self) -> None:
        assert calculate_similarity("rental cars dubai", "rental cars sharjah") == pytest.approx(0.5)


class TestKeywordDensity:
    def test_counts_substring_matches(self) -> None:
        density = calculate_keyword_density("Rental in Dubai. Rentals everywhere.", ["rental"])
        assert density["rental"] == pytest.approx(2 / 5)

    def test_empty_content(self) -> None:
        assert calculate_keyword_density("", ["rental"]) == {"rental": 0.0}

    def test_average_density(self) -> None:
        assert average_density({"a": 0.02, "b": 0.04}) == pytest.approx(0.03)
        assert average_density({}) == 0.0
        assert average_density(0.5) == 0.5


class TestReadability:
    def test_empty_text_scores_zero(self) -> None:
        assert calculate_readability_score("") == 0.0

    def test_simple_text_scores_high(self) -> None:
        assert calculate_readability_score("The car is red. We like it. It is fast.") > 80

    def test_score_is_clamped(self) -> None:
        text = "Incomprehensibilities internationalization institutionalization " * 10 + "."
        assert calculate_readability_score(text) == 0.0


class TestStatFormatting:
    def test_stat_key(self) -> None:
        assert format_stat_key("vehicles_available") == "Vehicles Available"

    def test_stat_value(self) -> None:
        assert format_stat_value(450) == "450"
        assert format_stat_value(3200) == "3.2K"
        assert format_stat_value(2_500_000) == "2.5M"
        assert format_stat_value("24/7") == "24/7"


class TestValidateGeneratedContent:
    def test_short_content_fails(self) -> None:
        content = generate_content(make_entity(entity_type="emirate", slug="ajman", name="Ajman"))
        result = validate_generated_content(content)
        assert result["valid"] is False
        assert any(issue.startswith("Content too short") for issue in result["issues"])

    def test_density_bounds(self) -> None:
        base = {"word_count": 900, "sections": [{}] * 5, "readability_score": 60.0}
        low = validate_generated_content({**base, "keyword_density": {"k": 0.001}})
        high = validate_generated_content({**base, "keyword_density": {"k": 0.09}})
        good = validate_generated_content({**base, "keyword_density": {"k": 0.02}})
        assert "Keyword density too low (target: 1-3%)" in low["issues"]
        assert "Keyword density too high (target: 1-3%)" in high["issues"]
        assert good == {"valid": True, "issues": []}
