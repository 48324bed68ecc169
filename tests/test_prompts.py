# =============================================================================
# tests/test_prompts.py - Domain Detection & Poster Prompt Tests
# =============================================================================
# Tests for the keyword heuristics (lib/domain_detection.py) and the final
# prompt sent to the image model (agents/prompts/).
#
# Run with: pytest tests/test_prompts.py -v
# =============================================================================

import pytest

from agents.prompts.expert_skills import build_expert_skills_prompt, get_expert_profile_for_domain
from agents.prompts.poster_prompt import PROFESSIONAL_STANDARDS_PROMPT, build_professional_prompt
from lib.domain_detection import (
    MISSING_EVENT_DATE,
    build_heuristic_analysis,
    detect_domain_heuristic,
    detect_domain_scored,
)


# =============================================================================
# Domain Detection
# =============================================================================

class TestDetectDomainHeuristic:
    """First matching domain wins."""

    @pytest.mark.parametrize("text,expected", [
        ("Grande veillée de prière ce vendredi", "church"),
        ("Menu du maquis", "restaurant"),
        ("Miniature pour ma chaîne", "youtube"),
        ("Masterclass marketing digital", "formation"),
        ("Gala de fin d'année", "event"),
        ("Villa à louer à Cocody", "realestate"),
    ])
    def test_domains(self, text, expected):
        assert detect_domain_heuristic(text) == expected

    def test_case_insensitive(self):
        assert detect_domain_heuristic("CULTE D'ACTION DE GRÂCE") == "church"

    def test_no_match(self):
        assert detect_domain_heuristic("Bonjour") is None


class TestDetectDomainScored:
    """Best score wins, 'other' when nothing matches."""

    def test_no_match_is_other(self):
        assert detect_domain_scored("Bonjour") == "other"

    def test_best_score(self):
        text = "Concert gospel, louange et adoration à l'église dimanche"

        assert detect_domain_scored(text) == "church"


class TestHeuristicAnalysis:
    """Regex-only analysis used when the AI gateway is down."""

    def test_shape(self):
        analysis = build_heuristic_analysis("Concert gospel samedi 18h, entrée gratuite")

        assert set(analysis) == {"suggested_domain", "extracted_info", "missing_info", "summary"}
        assert analysis["suggested_domain"] == "church"
        assert analysis["extracted_info"]["prices"] == "Gratuit"
        assert analysis["extracted_info"]["dates"] == "samedi · 18h"

    def test_contact_and_price(self):
        text = "Promo boutique: robes à 15000 FCFA. Contact: +229 97 00 00 00, shop@example.com"

        info = build_heuristic_analysis(text)["extracted_info"]

        assert "15000 FCFA" in info["prices"]
        assert "shop@example.com" in info["contact"]
        assert "+229 97 00 00 00" in info["contact"]

    def test_explicit_title_and_location(self):
        text = "Titre: Nuit des talents\nLieu: Palais des congrès"

        info = build_heuristic_analysis(text)["extracted_info"]

        assert info["title"] == "Nuit des talents"
        assert info["location"] == "Palais des congrès"

    def test_event_without_date_is_missing_date(self):
        analysis = build_heuristic_analysis("Soirée de gala des anciens élèves")

        assert analysis["suggested_domain"] == "event"
        assert analysis["missing_info"] == [MISSING_EVENT_DATE]

    def test_summary_truncated(self):
        text = "a" * 300

        assert build_heuristic_analysis(text)["summary"] == "a" * 160

    def test_empty_values_dropped(self):
        info = build_heuristic_analysis("bonjour")["extracted_info"]

        assert all(info.values())


# =============================================================================
# Expert Profiles
# =============================================================================

class TestExpertProfiles:
    """Domain to design profile mapping."""

    @pytest.mark.parametrize("domain,name", [
        ("church", "Spirituel / Religieux"),
        ("restaurant", "Restaurant / Food"),
        ("youtube", "Miniatures YouTube Virales"),
        ("event", "Surréaliste / Photoréaliste"),
        ("ecommerce", "Surréaliste / Photoréaliste"),
        ("technology", "Corporate Modern"),
        (None, "Corporate Modern"),
        ("unknown", "Corporate Modern"),
    ])
    def test_profile_names(self, domain, name):
        assert get_expert_profile_for_domain(domain).name == name

    def test_prompt_header(self):
        prompt = build_expert_skills_prompt("church")

        assert "COMPÉTENCES GRAPHISTE EXPERT - SPIRITUEL / RELIGIEUX" in prompt
        assert "COMPOSITION" in prompt
        assert "ERREURS À ÉVITER ABSOLUMENT" in prompt


# =============================================================================
# Final Prompt
# =============================================================================

class TestBuildProfessionalPrompt:
    """build_professional_prompt."""

    def test_free_creation(self):
        # Act
        prompt = build_professional_prompt(
            user_prompt="Affiche de type church. Veillée de prière",
            has_reference_image=False,
            has_content_image=False,
            aspect_ratio="3:4",
            domain="church",
        )

        # Assert
        assert prompt.startswith("Create a professional advertising poster")
        assert "- Format: 3:4 aspect ratio" in prompt
        assert "STANDARDS GRAPHISTE PROFESSIONNEL" in prompt
        assert "COMPÉTENCES GRAPHISTE EXPERT - SPIRITUEL / RELIGIEUX" in prompt
        assert "CRITICAL - STYLE REFERENCE" not in prompt
        assert "CRITICAL - CONTENT IMAGE" not in prompt
        assert prompt.endswith("USER SPECIFICATIONS:\nAffiche de type church. Veillée de prière")

    def test_reference_replaces_expert_block(self):
        prompt = build_professional_prompt(
            user_prompt="Menu du jour",
            has_reference_image=True,
            has_content_image=False,
            aspect_ratio="1:1",
            domain="restaurant",
        )

        assert "CRITICAL - STYLE REFERENCE" in prompt
        assert PROFESSIONAL_STANDARDS_PROMPT not in prompt
        assert "COMPÉTENCES GRAPHISTE EXPERT" not in prompt

    def test_content_image_block(self):
        prompt = build_professional_prompt(
            user_prompt="Lancement produit",
            has_reference_image=False,
            has_content_image=True,
            aspect_ratio="4:5",
        )

        assert "CRITICAL - CONTENT IMAGE" in prompt

    def test_domain_detected_when_missing(self):
        prompt = build_professional_prompt(
            user_prompt="Menu du restaurant, plat du jour et buffet",
            has_reference_image=False,
            has_content_image=False,
            aspect_ratio="3:4",
        )

        assert "COMPÉTENCES GRAPHISTE EXPERT - RESTAURANT / FOOD" in prompt
