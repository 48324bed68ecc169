# =============================================================================
# agents/prompts/ - Prompts for AI Agents
# =============================================================================
# - poster_prompt.py: Final prompt sent to the image model
# - expert_skills.py: Designer profiles (composition, typography, colors...)
#   injected when the user gives no style reference
# - analysis_prompts.py: System prompts for request/image/text analysis
# =============================================================================

from agents.prompts.poster_prompt import (
    PROFESSIONAL_STANDARDS_PROMPT,
    build_professional_prompt,
    build_professional_standards_prompt,
)
from agents.prompts.expert_skills import (
    EXPERT_SKILL_PROFILES,
    ExpertSkillProfile,
    build_expert_skills_prompt,
    get_expert_profile_for_domain,
)
from agents.prompts.analysis_prompts import (
    IMAGE_ANALYSIS_SYSTEM_PROMPT,
    REQUEST_ANALYSIS_SYSTEM_PROMPT,
    TEXT_EXTRACTION_SYSTEM_PROMPT,
)

__all__ = [
    "PROFESSIONAL_STANDARDS_PROMPT",
    "build_professional_prompt",
    "build_professional_standards_prompt",
    "EXPERT_SKILL_PROFILES",
    "ExpertSkillProfile",
    "build_expert_skills_prompt",
    "get_expert_profile_for_domain",
    "IMAGE_ANALYSIS_SYSTEM_PROMPT",
    "REQUEST_ANALYSIS_SYSTEM_PROMPT",
    "TEXT_EXTRACTION_SYSTEM_PROMPT",
]
