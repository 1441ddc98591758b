"""High-frequency target words per language and difficulty for cloze generation."""
from __future__ import annotations

import random
from typing import Dict, Iterable, List, Optional, Sequence

WORD_FREQUENCIES: Dict[str, Dict[str, List[str]]] = {
    "english": {
        "beginner": ["time", "people", "year", "good", "work", "first", "day", "know", "take", "come", "think", "look", "want", "give", "new"],
        "intermediate": ["important", "understand", "example", "between", "different", "experience", "company", "question", "service", "available", "community", "research", "business", "necessary", "situation"],
        "advanced": ["nevertheless", "comprehensive", "substantial", "phenomenon", "inevitable", "ambiguous", "meticulous", "consequently", "unprecedented", "scrutiny", "resilient", "inherent", "paradigm", "contemplate", "elaborate"],
    },
    "spanish": {
        "beginner": ["casa", "tiempo", "día", "hombre", "mujer", "año", "mundo", "vida", "agua", "trabajo", "ciudad", "amigo", "comer", "hablar", "grande"],
        "intermediate": ["importante", "desarrollo", "empresa", "gobierno", "sistema", "pregunta", "servicio", "comunidad", "educación", "investigación", "negocio", "relación", "ambiente", "oportunidad", "necesario"],
        "advanced": ["sin embargo", "exhaustivo", "fenómeno", "inevitable", "ambiguo", "meticuloso", "consecuentemente", "escrutinio", "inherente", "paradigma", "contemplar", "elaborar", "sustancial", "perspectiva", "trascendental"],
    },
    "french": {
        "beginner": ["maison", "temps", "jour", "homme", "femme", "année", "monde", "vie", "eau", "travail", "ville", "ami", "manger", "parler", "grand"],
        "intermediate": ["important", "comprendre", "exemple", "différent", "expérience", "entreprise", "gouvernement", "question", "service", "disponible", "communauté", "recherche", "nécessaire", "situation", "relation"],
        "advanced": ["néanmoins", "exhaustif", "phénomène", "inévitable", "ambigu", "méticuleux", "par conséquent", "inhérent", "paradigme", "envisager", "élaborer", "substantiel", "perspective", "bouleverser", "rigoureux"],
    },
    "german": {
        "beginner": ["Haus", "Zeit", "Tag", "Mann", "Frau", "Jahr", "Welt", "Leben", "Wasser", "Arbeit", "Stadt", "Freund", "essen", "sprechen", "groß"],
        "intermediate": ["wichtig", "verstehen", "Beispiel", "zwischen", "verschieden", "Erfahrung", "Unternehmen", "Regierung", "Frage", "verfügbar", "Gemeinschaft", "Forschung", "notwendig", "Situation", "Beziehung"],
        "advanced": ["dennoch", "umfassend", "Phänomen", "unvermeidlich", "zweideutig", "sorgfältig", "folglich", "beispiellos", "inhärent", "Paradigma", "erwägen", "ausarbeiten", "wesentlich", "Perspektive", "widerstandsfähig"],
    },
    "italian": {
        "beginner": ["casa", "tempo", "giorno", "uomo", "donna", "anno", "mondo", "vita", "acqua", "lavoro", "città", "amico", "mangiare", "parlare", "grande"],
        "intermediate": ["importante", "capire", "esempio", "diverso", "esperienza", "azienda", "governo", "domanda", "servizio", "disponibile", "comunità", "ricerca", "necessario", "situazione", "rapporto"],
        "advanced": ["tuttavia", "esauriente", "fenomeno", "inevitabile", "ambiguo", "meticoloso", "di conseguenza", "intrinseco", "paradigma", "contemplare", "elaborare", "sostanziale", "prospettiva", "rigoroso", "resiliente"],
    },
}

FALLBACK_LANGUAGE = "english"


def candidate_words(language: str, difficulty: str) -> List[str]:
    """Word pool for a language and level; unsupported languages use the English pool."""

    pools = WORD_FREQUENCIES.get(language.lower()) or WORD_FREQUENCIES[FALLBACK_LANGUAGE]
    return list(pools.get(difficulty) or pools["beginner"])


def pick_target_word(
    language: str,
    difficulty: str,
    avoid: Iterable[str] = (),
    rng: Optional[random.Random] = None,
) -> str:
    """Random pool word not on the avoidance list; falls back to the full pool when all are avoided."""

    rng = rng or random.Random()
    pool: Sequence[str] = candidate_words(language, difficulty)
    avoided = {word.strip().lower() for word in avoid}
    fresh = [word for word in pool if word.lower() not in avoided]
    return rng.choice(fresh or list(pool))
