# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the Pydantic models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - camelCase bodies from the web client are accepted
# - Nullable database columns get sensible defaults
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    AnalysisResult,
    AspectRatio,
    ColorsConfirmRequest,
    Conversation,
    ConversationStep,
    CreatePaymentRequest,
    ExtractedInfo,
    GenerateImageRequest,
    ImageSubmitRequest,
    OutputFormat,
    Resolution,
    SubscriptionPlan,
    UserSubscription,
)


# =============================================================================
# Generation Model Tests
# =============================================================================

class TestGenerateImageRequest:
    """Tests for GenerateImageRequest."""

    def test_defaults(self):
        """Only the prompt is required."""
        request = GenerateImageRequest(prompt="Concert gospel")

        assert request.aspect_ratio == AspectRatio.PORTRAIT_3_4
        assert request.resolution == Resolution.K2
        assert request.output_format == OutputFormat.PNG
        assert request.reference_image is None
        assert request.domain is None

    def test_camel_case_body(self):
        """Test that the web client's camelCase keys are accepted."""
        # Arrange: body as sent by the frontend
        body = {
            "prompt": "Menu du jour",
            "aspectRatio": "9:16",
            "outputFormat": "jpg",
            "referenceImage": "https://img/ref.png",
        }

        # Act
        request = GenerateImageRequest.model_validate(body)

        # Assert
        assert request.aspect_ratio == AspectRatio.STORY
        assert request.output_format == OutputFormat.JPG
        assert request.reference_image == "https://img/ref.png"

    def test_blank_prompt_rejected(self):
        with pytest.raises(ValidationError):
            GenerateImageRequest(prompt="   ")

    def test_unknown_resolution_rejected(self):
        with pytest.raises(ValidationError):
            GenerateImageRequest(prompt="Gala", resolution="8K")

    def test_data_url_image_accepted(self):
        request = GenerateImageRequest(prompt="Gala", content_image=" data:image/png;base64,cG9zdGVy ")

        assert request.content_image == "data:image/png;base64,cG9zdGVy"

    @pytest.mark.parametrize("image", ["photo.png", "data:text/plain;base64,cG9zdGVy", "ftp://cdn/a.png"])
    def test_image_must_be_url_or_data_url(self, image):
        with pytest.raises(ValidationError):
            GenerateImageRequest(prompt="Gala", reference_image=image)

    def test_json_dump_uses_enum_values(self):
        """The worker receives the request as JSON."""
        dumped = GenerateImageRequest(prompt="Gala", resolution="4K").model_dump(mode="json")

        assert dumped["resolution"] == "4K"
        assert dumped["aspect_ratio"] == "3:4"


# =============================================================================
# Analysis Model Tests
# =============================================================================

class TestAnalysisModels:
    """Tests for AnalysisResult and ExtractedInfo."""

    def test_lists_and_numbers_flattened(self):
        info = ExtractedInfo.model_validate({"dates": ["12/03", None, "18h"], "prices": 5000})

        assert info.dates == "12/03 · 18h"
        assert info.prices == "5000"

    def test_nulls_become_defaults(self):
        result = AnalysisResult.model_validate({
            "suggestedDomain": None,
            "extractedInfo": None,
            "missingInfo": None,
            "summary": None,
        })

        assert result.extracted_info == ExtractedInfo()
        assert result.missing_info == []
        assert result.summary == ""


# =============================================================================
# Conversation Model Tests
# =============================================================================

class TestConversation:
    """Tests for Conversation and its request bodies."""

    def test_new_conversation(self):
        conversation = Conversation(user_id="aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")

        assert conversation.state.step == ConversationStep.GREETING
        assert conversation.state.aspect_ratio == AspectRatio.PORTRAIT_3_4
        assert conversation.state.resolution == Resolution.K1
        assert conversation.messages == []
        assert conversation.id

    def test_json_roundtrip_keeps_state(self):
        conversation = Conversation(user_id="u-1")
        conversation.state.step = ConversationStep.COLORS
        conversation.state.color_palette = ["#000000"]

        restored = Conversation.model_validate_json(conversation.model_dump_json())

        assert restored.state.step == ConversationStep.COLORS
        assert restored.state.color_palette == ["#000000"]

    def test_colors_trimmed(self):
        request = ColorsConfirmRequest(colors=[" #FFD700 ", "", "#1E3A8A"])

        assert request.colors == ["#FFD700", "#1E3A8A"]

    @pytest.mark.parametrize("colors", [[], ["  "], ["#1"] * 7])
    def test_invalid_colors(self, colors):
        with pytest.raises(ValidationError):
            ColorsConfirmRequest(colors=colors)

    def test_image_submit_rejects_plain_text(self):
        with pytest.raises(ValidationError):
            ImageSubmitRequest(image="mon affiche")


# =============================================================================
# Subscription Model Tests
# =============================================================================

class TestSubscriptionPlan:
    """Tests for SubscriptionPlan."""

    def test_features_from_json_string(self):
        plan = SubscriptionPlan(id="p", name="Pro", slug="pro", features='["4K", "100 crédits"]')

        assert plan.features == ["4K", "100 crédits"]

    @pytest.mark.parametrize("features,expected", [
        (None, []),
        ("Support prioritaire", ["Support prioritaire"]),
        ({"a": 1}, []),
    ])
    def test_features_coercion(self, features, expected):
        plan = SubscriptionPlan(id="p", name="Pro", slug="pro", features=features)

        assert plan.features == expected

    def test_missing_resolution_defaults_to_1k(self):
        plan = SubscriptionPlan(id="p", name="Gratuit", slug="free", max_resolution=None)

        assert plan.max_resolution == Resolution.K1
        assert plan.is_free is True


class TestUserSubscription:
    def test_null_counters(self):
        subscription = UserSubscription(
            id="s", user_id="u", credits_remaining=None, free_generations_used=None,
        )

        assert subscription.credits_remaining == 0
        assert subscription.free_generations_used == 0


class TestCreatePaymentRequest:
    def test_plan_slug_required(self):
        with pytest.raises(ValidationError):
            CreatePaymentRequest.model_validate({"planSlug": ""})

    def test_camel_case(self):
        request = CreatePaymentRequest.model_validate({"planSlug": "pro", "returnUrl": "https://app/ok"})

        assert request.plan_slug == "pro"
        assert request.return_url == "https://app/ok"
