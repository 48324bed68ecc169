# =============================================================================
# agents/prompts/poster_prompt.py - Image Generation Prompt
# =============================================================================
# Builds the final prompt sent to the image model. The user's request is
# wrapped in fixed instructions:
#
#   1. Format and print-quality rules
#   2. Style reference block (first input image), when provided
#   3. Content image block (second input image), when provided
#   4. Rules (no color codes on the poster, only user text...)
#   5. USER SPECIFICATIONS: the user's prompt
#
# Without a style reference, the universal professional standards and the
# expert profile of the poster's domain are appended so the model still
# follows a designer's rules.
#
# Usage:
#   prompt = build_professional_prompt(
#       user_prompt="Affiche pour une veillée de prière",
#       has_reference_image=False,
#       has_content_image=False,
#       aspect_ratio="3:4",
#       domain="church",
#   )
# =============================================================================

from agents.prompts.expert_skills import build_expert_skills_prompt
from lib.domain_detection import detect_domain_scored


# =============================================================================
# Professional Standards
# =============================================================================

PROFESSIONAL_STANDARDS_PROMPT = "\n".join([
    "═══ 🎓 STANDARDS GRAPHISTE PROFESSIONNEL (15+ ANS EXPÉRIENCE) ═══",
    "",
    "【HIÉRARCHIE】Titre 2x+ sous-titre | Ratio 5:2:1 | Point d'entrée haut-gauche",
    "【CONTRASTE】Dramatique, jamais subtil | Bold vs Light | Ratio 3:1 tailles",
    "【ALIGNEMENT】Grille 12 colonnes | Espacement ×10px | Jamais flottant",
    "【ESPACE BLANC】30-50% obligatoire | Marges ≥5% | Respiration visuelle",
    "【PROPORTION】Golden Ratio 1:1.618 | Règle des tiers | 60/40 ou 70/30",
    "",
    "【TYPO】Max 2-3 polices | Titre 50-80pt | Corps ≥14pt | Ratio 2:1 niveaux",
    "【TYPO】Ligne max 80 car | Corps aligné gauche | Majuscules +10% espacement",
    "【TYPO DESIGN】JAMAIS de texte plat/basique | Titres avec effets 3D, ombres épaisses, "
    "contours, dégradés, glow ou metallic | Texte = élément graphique designé",
    "【LAYOUT PRO】Courbes, vagues, arcs, formes organiques pour structurer | Bandeaux obliques, "
    "rubans 3D | Séparateurs décoratifs | Superposition de couches avec profondeur",
    "",
    "【COULEURS】Règle 60-30-10 | Max 3-5 couleurs | Contraste WCAG 4.5:1",
    "",
    "【INTERDIT】Étirer images | 4+ polices | Texte <14pt | Marges <5% | Pas grille",
    "",
])


def build_professional_standards_prompt() -> str:
    """Universal design rules, condensed to fit the model's prompt budget."""
    return PROFESSIONAL_STANDARDS_PROMPT


# =============================================================================
# Final Prompt
# =============================================================================

def build_professional_prompt(
    user_prompt: str,
    has_reference_image: bool,
    has_content_image: bool,
    aspect_ratio: str,
    domain: str | None = None,
) -> str:
    """
    Wrap the user's prompt in poster design instructions.

    Args:
        user_prompt: What the user asked for (texts, mood, colors)
        has_reference_image: A style reference is sent as first input image
        has_content_image: A content image is sent after the reference
        aspect_ratio: e.g. "3:4"
        domain: Poster domain; detected from the prompt when None and no
            style reference is given

    Returns:
        The prompt sent to the image model
    """
    lines = [
        "Create a professional advertising poster with the following specifications:",
        f"- Format: {aspect_ratio} aspect ratio",
        "- High-quality graphic design suitable for print",
        "- Clean, legible typography with clear visual hierarchy",
        "- Modern, polished aesthetic",
        "- African characters with authentic features when people are shown",
    ]

    if has_reference_image:
        lines += [
            "",
            "CRITICAL - STYLE REFERENCE (First image provided):",
            "- Reproduce EXACTLY the visual style, composition, and layout from the reference image",
            "- Match the typography style, color scheme, and design elements",
            "- Keep the same professional aesthetic and visual hierarchy",
            "- Adapt the style to the new content while maintaining visual consistency",
        ]

    if has_content_image:
        lines += [
            "",
            "CRITICAL - CONTENT IMAGE (Second image provided):",
            "- INTEGRATE the provided content image prominently in the poster",
            "- The content image should be the main visual element",
            "- Position it professionally within the layout",
            "- Do NOT replace or generate a different image - USE the one provided",
        ]

    lines += [
        "",
        "IMPORTANT RULES:",
        "- Do NOT display any color codes, hex values, or technical text",
        "- All text on the poster must be from the user's specifications",
        "- Apply colors harmoniously throughout the design",
        "- Ensure professional print quality",
    ]

    # Free creation: the reference image already dictates the style otherwise.
    if not has_reference_image:
        lines += [
            "",
            build_professional_standards_prompt(),
            build_expert_skills_prompt(domain or detect_domain_scored(user_prompt)),
        ]

    lines += [
        "",
        "USER SPECIFICATIONS:",
        user_prompt,
    ]

    return "\n".join(lines)
