# =============================================================================
# lib/domain_detection.py - Poster Domain Keyword Heuristics
# =============================================================================
# Keyword-based helpers used when the AI gateway is not available or did not
# answer with usable JSON:
# - detect_domain_heuristic(): first domain whose keywords appear (analysis)
# - detect_domain_scored(): best-scoring domain (prompt enrichment)
# - build_heuristic_analysis(): regex extraction of title, contact, prices...
#
# Usage:
#   from lib.domain_detection import detect_domain_heuristic
#   detect_domain_heuristic("Grande veillée de prière")  # "church"
# =============================================================================

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Keyword Tables
# =============================================================================

# Ordered: the first matching domain wins.
HEURISTIC_KEYWORDS: list[tuple[str, list[str]]] = [
    ("youtube", [
        "miniature", "thumbnail", "youtube", "vignette", "chaîne", "chaine",
        "vidéo youtube", "video youtube", "youtuber", "youtubeur",
        "créateur de contenu", "createur de contenu", "abonnés", "abonnes",
        "vues", "viral", "clickbait", "tutoriel youtube", "tuto youtube",
        "vlog", "unboxing", "storytime", "reaction", "réaction",
    ]),
    ("church", ["église", "eglise", "culte", "pasteur", "prière", "priere", "gospel", "veillée", "veillee"]),
    ("restaurant", ["restaurant", "menu", "plat", "cuisine", "maquis", "bar", "café", "cafe"]),
    ("formation", ["formation", "atelier", "workshop", "masterclass", "coaching", "webinaire", "séminaire", "seminaire"]),
    ("event", ["événement", "evenement", "conférence", "conference", "gala", "mariage", "fête", "fete", "cérémonie", "ceremonie"]),
    ("fashion", ["mode", "couture", "collection", "boutique", "vêtement", "vetement", "accessoires"]),
    ("music", ["concert", "artiste", "album", "musique", "dj", "festival"]),
    ("sport", ["match", "tournoi", "sport", "marathon", "fitness", "gym"]),
    ("technology", ["application", "logiciel", "startup", "digital", "site web", "technologie"]),
    ("health", ["santé", "sante", "médecin", "medecin", "clinique", "pharmacie", "soins"]),
    ("realestate", ["immobilier", "maison", "appartement", "villa", "terrain", "location", "vente"]),
    ("education", ["école", "ecole", "université", "universite", "diplôme", "diplome", "inscription"]),
]

# Broader lists used for scoring; may return "ecommerce", which only exists
# as a styling profile, not as a selectable domain.
SCORED_KEYWORDS: dict[str, list[str]] = {
    "youtube": [
        "miniature", "thumbnail", "youtube", "vignette", "chaîne", "chaine", "vidéo youtube",
        "video youtube", "youtuber", "youtubeur", "créateur", "createur", "contenu", "abonnés",
        "abonnes", "vues", "viral", "buzz", "clickbait", "tutoriel", "tuto", "vlog", "podcast",
        "interview", "réaction", "reaction", "challenge", "storytime", "unboxing", "haul",
        "review", "avis", "test", "1m vues", "millions de vues", "subscriber", "subscribe",
    ],
    "church": [
        "église", "eglise", "culte", "pasteur", "évêque", "eveque", "prophète", "prophete",
        "prière", "priere", "jeûne", "jeune", "veillée", "veillee", "chrétien", "chretien",
        "louange", "adoration", "gospel", "worship", "crusade", "convention", "revival",
        "saint-esprit", "saint esprit", "dieu", "seigneur", "biblique", "temple", "tabernacle",
        "dimanche", "nuit de prière", "intercession", "onction", "ministère", "ministere",
    ],
    "restaurant": [
        "restaurant", "menu", "plat", "cuisine", "chef", "manger", "repas", "déjeuner", "dejeuner",
        "dîner", "diner", "buffet", "traiteur", "food", "gastronomie", "recette", "saveur",
        "délice", "delice", "gourmand", "culinaire", "table", "réservation", "reservation",
        "livraison", "commande", "prix", "promotion", "offre", "promo", "réduction", "reduction",
    ],
    "formation": [
        "formation", "séminaire", "seminaire", "atelier", "workshop", "cours", "coaching",
        "masterclass", "webinaire", "conférence", "conference", "certification", "diplôme",
        "diplome", "apprentissage", "compétence", "competence", "professionnel", "carrière",
        "carriere", "emploi", "entrepreneuriat", "business", "management", "leadership",
    ],
    "event": [
        "événement", "evenement", "concert", "soirée", "soiree", "fête", "fete", "célébration",
        "celebration", "show", "spectacle", "gala", "festival", "cérémonie", "ceremonie",
        "inauguration", "anniversaire", "mariage", "fiançailles", "fiancailles", "party",
    ],
    "music": [
        "musique", "music", "album", "single", "artiste", "chanteur", "chanteuse", "rap",
        "afrobeat", "hip-hop", "hip hop", "rnb", "r&b", "jazz", "reggae", "coupé-décalé",
        "coupe decale", "afropop", "ndombolo", "rumba", "makossa",
    ],
    "sport": [
        "sport", "football", "basket", "basketball", "match", "tournoi", "compétition",
        "competition", "athlète", "athlete", "équipe", "equipe", "marathon", "course",
        "natation", "tennis", "boxe", "arts martiaux", "fitness", "musculation",
    ],
    "ecommerce": [
        "promo", "promotion", "solde", "réduction", "reduction", "vente", "achat", "boutique",
        "shop", "produit", "article", "offre", "prix", "livraison", "commande", "panier",
        "paiement", "commerce", "magasin", "stock", "nouveau", "nouveauté",
    ],
    "fashion": [
        "mode", "fashion", "collection", "vêtement", "vetement", "style", "couture", "défilé",
        "defile", "boutique", "prêt-à-porter", "pret a porter", "accessoire", "bijou",
        "tendance", "élégance", "elegance", "chic", "glamour",
    ],
    "technology": [
        "technologie", "tech", "digital", "numérique", "numerique", "application", "app",
        "startup", "innovation", "hackathon", "développement", "developpement", "code",
        "programmation", "intelligence artificielle", "ia", "ai", "data", "cloud",
    ],
    "health": [
        "santé", "sante", "health", "médical", "medical", "hôpital", "hopital", "clinique",
        "consultation", "bien-être", "bien etre", "fitness", "pharmacie", "docteur", "médecin",
        "medecin", "soins", "traitement", "thérapie", "therapie",
    ],
    "realestate": [
        "immobilier", "appartement", "maison", "terrain", "location", "vente", "agence",
        "propriété", "propriete", "logement", "résidence", "residence", "villa", "duplex",
        "studio", "chambre", "loyer", "achat", "investissement",
    ],
    "education": [
        "éducation", "education", "école", "ecole", "université", "universite", "étudiant",
        "etudiant", "enseignement", "professeur", "cours", "examen", "diplôme", "diplome",
        "baccalauréat", "baccalaureat", "licence", "master", "doctorat",
    ],
}


# =============================================================================
# Domain Detection
# =============================================================================

def detect_domain_heuristic(text: str) -> str | None:
    """
    Return the first domain whose keyword list matches `text`, or None.

    Example:
        detect_domain_heuristic("Menu du maquis")  # "restaurant"
    """
    lower = text.lower()
    for domain, keywords in HEURISTIC_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return domain
    return None


def detect_domain_scored(text: str) -> str:
    """
    Return the domain whose keywords score best in `text`.

    Each keyword found as a substring scores 1, plus 0.5 when it also
    matches as a whole word. Ties keep the earlier domain; no match
    gives "other".
    """
    lower = text.lower()
    best_domain, best_score = "other", 0.0

    for domain, keywords in SCORED_KEYWORDS.items():
        score = 0.0
        for keyword in keywords:
            if keyword in lower:
                score += 1
                if re.search(rf"\b{re.escape(keyword)}\b", lower):
                    score += 0.5
        if score > best_score:
            best_domain, best_score = domain, score

    logger.debug(f"Domain detection: '{best_domain}' with score {best_score}")
    return best_domain


# =============================================================================
# Heuristic Analysis
# =============================================================================

_TITLE = re.compile(r"(?:titre(?:\s+principal)?|title)\s*[:\-]\s*([^\n]+)", re.IGNORECASE)
_ORGANIZER = re.compile(
    r"(?:organisé\s+par|organise\s+par|organisation|entreprise|société|societe)\s*[:\-]\s*([^\n.]+)",
    re.IGNORECASE,
)
_UPPERCASE_NAME = re.compile(r"\b([A-Z][A-Z0-9&'’.\-]+(?:\s+[A-Z0-9&'’.\-]+){1,5})\b")
_LOCATION = re.compile(r"(?:lieu|adresse|localisation)\s*[:\-]\s*([^\n.]+)", re.IGNORECASE)
_PHONE = re.compile(r"(\+?\d[\d\s().\-]{7,}\d)")
_EMAIL = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
_WEBSITE = re.compile(r"\bhttps?://[^\s)]+|\bwww\.[^\s)]+", re.IGNORECASE)
_HANDLE = re.compile(r"@[a-z0-9._-]{2,}", re.IGNORECASE)
_FREE = re.compile(r"\bgratuit(?:e|s|es)?\b", re.IGNORECASE)
_PRICE = re.compile(r"\b\d+(?:[.,]\d+)?\s?(?:FCFA|XOF|CFA|USD|€|\$)", re.IGNORECASE)
_NUMERIC_DATE = re.compile(r"\b\d{1,2}[/\-.]\d{1,2}(?:[/\-.]\d{2,4})?\b")
_WEEKDAY = re.compile(r"\b(?:lundi|mardi|mercredi|jeudi|vendredi|samedi|dimanche)\b", re.IGNORECASE)
_HOUR = re.compile(r"\b\d{1,2}\s?h(?:\s?\d{2})?\b", re.IGNORECASE)

MISSING_EVENT_DATE = "date et heure (si vous voulez l'indiquer)"


def _extract_first(pattern: re.Pattern, text: str) -> str | None:
    match = pattern.search(text)
    if match and match.group(1) and match.group(1).strip():
        return match.group(1).strip()
    return None


def _unique_join(tokens: list[str]) -> str | None:
    """Deduplicate preserving order and join with ' · '."""
    seen = list(dict.fromkeys(token.strip() for token in tokens if token and token.strip()))
    return " · ".join(seen) if seen else None


def build_heuristic_analysis(text: str) -> dict[str, Any]:
    """
    Build a request analysis from regexes only.

    Used as graceful degradation when the AI gateway is down. The result
    has the same shape as the AI analysis (see AnalysisResult).

    Example:
        build_heuristic_analysis("Concert gospel samedi 18h, entrée gratuite")
        # {"suggested_domain": "church", "extracted_info": {"prices": "Gratuit",
        #  "dates": "samedi · 18h", ...}, "missing_info": [], "summary": "..."}
    """
    suggested_domain = detect_domain_heuristic(text)

    title = _extract_first(_TITLE, text)
    if title is None:
        first_line = re.split(r"\n|\.", text)[0].strip()[:90]
        title = first_line or None

    organizer = _extract_first(_ORGANIZER, text)
    if organizer is None:
        match = _UPPERCASE_NAME.search(text)
        organizer = match.group(1) if match else None

    location = _extract_first(_LOCATION, text)

    contact = _unique_join(
        _PHONE.findall(text)
        + _EMAIL.findall(text)
        + _WEBSITE.findall(text)
        + _HANDLE.findall(text)
    )

    prices = "Gratuit" if _FREE.search(text) else _unique_join(_PRICE.findall(text))

    dates = _unique_join(
        _NUMERIC_DATE.findall(text)
        + _WEEKDAY.findall(text)
        + _HOUR.findall(text)
    )

    missing_info = [MISSING_EVENT_DATE] if suggested_domain == "event" and not dates else []

    extracted = {
        "title": title,
        "dates": dates,
        "prices": prices,
        "contact": contact,
        "location": location,
        "organizer": organizer,
    }

    return {
        "suggested_domain": suggested_domain,
        "extracted_info": {key: value for key, value in extracted.items() if value},
        "missing_info": missing_info,
        "summary": text[:160],
    }
