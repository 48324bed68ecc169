# =============================================================================
# tests/test_agents.py - AI Agent Tests
# =============================================================================
# Tests for the request analyst, the image analyst and the text extractor.
# chat_completion is patched in each agent module; no gateway is called.
#
# Run with: pytest tests/test_agents.py -v
# =============================================================================

import json
from unittest.mock import patch

import pytest

from agents.image_analyst import ImageAnalysisError, ImageAnalystAgent
from agents.request_analyst import DEGRADED_WARNING, RequestAnalysisError, RequestAnalystAgent
from agents.text_extractor import TextExtractionError, TextExtractorAgent, parse_text_blocks
from lib.ai_gateway import AIGatewayError, vision_message


# =============================================================================
# Request Analyst
# =============================================================================

class TestRequestAnalyst:
    """RequestAnalystAgent.analyze."""

    @pytest.fixture
    def analyst(self):
        return RequestAnalystAgent(model="test-model", max_length=200)

    def test_parses_model_json(self, analyst):
        # Arrange
        answer = json.dumps({
            "suggestedDomain": "church",
            "extractedInfo": {"title": "Croisade", "dates": ["12/03", "18h"], "speakers": None},
            "missingInfo": [],
            "summary": "Affiche de croisade",
        })

        # Act
        with patch("agents.request_analyst.chat_completion", return_value=f"```json\n{answer}\n```") as mock_chat:
            response = analyst.analyze("  Croisade le 12/03 à 18h  ")

        # Assert
        assert response.warning is None
        assert response.analysis.suggested_domain == "church"
        assert response.analysis.extracted_info.title == "Croisade"
        assert response.analysis.extracted_info.dates == "12/03 · 18h"
        messages = mock_chat.call_args.args[0]
        assert messages[0]["role"] == "system"
        assert messages[1] == {"role": "user", "content": "Croisade le 12/03 à 18h"}
        assert mock_chat.call_args.kwargs["model"] == "test-model"

    def test_invalid_json_falls_back_to_keywords(self, analyst):
        with patch("agents.request_analyst.chat_completion", return_value="Désolé, je ne peux pas"):
            response = analyst.analyze("Menu du maquis ce weekend")

        assert response.analysis.suggested_domain == "restaurant"
        assert response.analysis.summary == "Menu du maquis ce weekend"

    def test_gateway_down_uses_heuristic(self, analyst):
        error = AIGatewayError("unreachable")
        with patch("agents.request_analyst.chat_completion", side_effect=error):
            response = analyst.analyze("Concert gospel samedi 18h, entrée gratuite")

        assert response.warning == DEGRADED_WARNING
        assert response.analysis.suggested_domain == "church"
        assert response.analysis.extracted_info.prices == "Gratuit"

    @pytest.mark.parametrize("code,status", [("RATE_LIMITED", 429), ("PAYMENT_REQUIRED", 402)])
    def test_surfaced_gateway_errors(self, analyst, code, status):
        error = AIGatewayError("stop", code=code, status_code=status)
        with patch("agents.request_analyst.chat_completion", side_effect=error):
            with pytest.raises(AIGatewayError) as exc_info:
                analyst.analyze("Concert")

        assert exc_info.value.status_code == status

    def test_empty_answer(self, analyst):
        with patch("agents.request_analyst.chat_completion", return_value=""):
            with pytest.raises(RequestAnalysisError) as exc_info:
                analyst.analyze("Concert")

        assert exc_info.value.code == "NO_ANALYSIS"

    @pytest.mark.parametrize("text", [None, "", "   ", 42, "x" * 201])
    def test_invalid_input(self, analyst, text):
        with pytest.raises(RequestAnalysisError) as exc_info:
            analyst.analyze(text)

        assert exc_info.value.code == "INVALID_INPUT"
        assert exc_info.value.status_code == 400


# =============================================================================
# Image Analyst
# =============================================================================

class TestImageAnalyst:
    """ImageAnalystAgent.describe."""

    def test_describe(self):
        with patch("agents.image_analyst.chat_completion", return_value="  Style néon, fond violet  ") as mock_chat:
            description = ImageAnalystAgent(model="vision").describe("https://img/ref.png")

        assert description == "Style néon, fond violet"
        user_message = mock_chat.call_args.args[0][1]
        assert user_message["content"][1] == {"type": "image_url", "image_url": {"url": "https://img/ref.png"}}

    def test_missing_image(self):
        with pytest.raises(ImageAnalysisError) as exc_info:
            ImageAnalystAgent(model="vision").describe("")

        assert exc_info.value.status_code == 400

    def test_empty_description(self):
        with patch("agents.image_analyst.chat_completion", return_value="   "):
            with pytest.raises(ImageAnalysisError) as exc_info:
                ImageAnalystAgent(model="vision").describe("https://img/ref.png")

        assert exc_info.value.code == "NO_DESCRIPTION"


# =============================================================================
# Text Extractor
# =============================================================================

class TestParseTextBlocks:
    """parse_text_blocks clamps untrusted model output."""

    def test_clamping_and_defaults(self):
        content = json.dumps([
            {"text": " GALA ", "x": 120, "y": -5, "width": 2, "height": 80, "fontSize": 500},
            {"text": "Samedi 18h", "x": "10", "y": 50},
        ])

        blocks = parse_text_blocks(content)

        assert [b.text for b in blocks] == ["GALA", "Samedi 18h"]
        assert (blocks[0].x, blocks[0].y) == (100, 0)
        assert (blocks[0].width, blocks[0].height, blocks[0].font_size) == (5, 50, 150)
        assert blocks[1].x == 10
        assert (blocks[1].width, blocks[1].height, blocks[1].font_size) == (20, 5, 32)
        assert all(block.confidence == 95 for block in blocks)

    def test_empty_texts_dropped(self):
        assert parse_text_blocks('[{"text": "  "}, {"x": 3}, "loose"]') == []

    def test_fenced_json(self):
        blocks = parse_text_blocks('```json\n[{"text": "PROMO"}]\n```')

        assert blocks[0].text == "PROMO"

    @pytest.mark.parametrize("content", ["pas de JSON", '{"text": "objet"}', ""])
    def test_unparsable(self, content):
        assert parse_text_blocks(content) == []


class TestTextExtractor:
    """TextExtractorAgent.extract."""

    def test_extract(self):
        with patch("agents.text_extractor.chat_completion", return_value='[{"text": "SOLDES"}]'):
            blocks = TextExtractorAgent(model="vision").extract("data:image/png;base64,AAA")

        assert [b.text for b in blocks] == ["SOLDES"]

    def test_missing_image(self):
        with pytest.raises(TextExtractionError):
            TextExtractorAgent(model="vision").extract("")


class TestVisionMessage:
    def test_shape(self):
        message = vision_message("Décris", "https://img/a.png")

        assert message == {
            "role": "user",
            "content": [
                {"type": "text", "text": "Décris"},
                {"type": "image_url", "image_url": {"url": "https://img/a.png"}},
            ],
        }
