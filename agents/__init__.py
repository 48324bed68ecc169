# =============================================================================
# agents/ - AI Agent Definitions
# =============================================================================
# This package contains the AI agents behind poster creation:
# - request_analyst.py: Reads a free-text request, suggests a domain and
#   extracts the poster's facts (falls back to regex heuristics)
# - image_analyst.py: Describes a reference poster's style
# - text_extractor.py: Locates the texts of a poster for the visual editor
# - poster_generator.py: Builds the final prompt and runs Kie AI
#
# Prompts:
# - prompts/poster_prompt.py: Final image prompt + professional standards
# - prompts/expert_skills.py: Per-domain designer profiles
# - prompts/analysis_prompts.py: System prompts of the gateway helpers
# =============================================================================

from agents.request_analyst import RequestAnalystAgent, RequestAnalysisError
from agents.image_analyst import ImageAnalystAgent, ImageAnalysisError
from agents.text_extractor import TextExtractorAgent, TextExtractionError, parse_text_blocks
from agents.poster_generator import PosterGenerator, PROVIDER_NAME

__all__ = [
    # Analysis
    "RequestAnalystAgent",
    "RequestAnalysisError",
    "ImageAnalystAgent",
    "ImageAnalysisError",
    "TextExtractorAgent",
    "TextExtractionError",
    "parse_text_blocks",
    # Generation
    "PosterGenerator",
    "PROVIDER_NAME",
]
