"""
Prompt construction for tag suggestions.

The prompt is written in French: the provider is asked for French month
names, and the expected calendar tags for the reference date are computed
here and spelled out in the instruction.
"""
from datetime import date
from typing import List

FRENCH_MONTHS = [
    "JANVIER", "FEVRIER", "MARS", "AVRIL", "MAI", "JUIN",
    "JUILLET", "AOUT", "SEPTEMBRE", "OCTOBRE", "NOVEMBRE", "DECEMBRE",
]

PROMPT_TEMPLATE = """Analyse le texte suivant et suggère 3 à 10 mots-clés ou concepts pertinents de un ou deux mots qui pourraient servir de tags. Retourne-les sous forme de liste séparée par des virgules, sans aucune autre introduction ni explication, chaque tag est donné en majuscule. Par exemple: "TECHNOLOGIE, INTELLIGENCE ARTIFICIELLE, FUTUR".
TU DOIS OBLIGATOIREMENT AJOUTER aux tags proposés, l'année (sur quatre chiffres), le mois (en français et en majuscules), le mois (en français et en majuscules) avec l'année (e.g. FEVRIER 2025), le trimestre avec l'année (e.g. T1 2025), le quadrimestre avec l'année (e.g. Q1 2025), le semestre avec l'année (e.g. S1 2025). Les tags temporels doivent aussi être en majuscules.
Tags temporels pour cette date: {date_tags}
Texte: "{content}"
Date pour référence temporelle: "{date}"
Tags suggérés:"""


def quarter(month: int) -> int:
    return (month + 2) // 3


def four_month_period(month: int) -> int:
    return (month + 3) // 4


def half_year(month: int) -> int:
    return (month + 5) // 6


def date_tags(reference: date) -> List[str]:
    """
    Calendar tags for a reference date.

    Returns year, month name, month with year, quarter (T), four-month
    period (Q) and half-year (S), e.g. for 2025-02-15::

        ['2025', 'FEVRIER', 'FEVRIER 2025', 'T1 2025', 'Q1 2025', 'S1 2025']
    """
    year = reference.year
    month_name = FRENCH_MONTHS[reference.month - 1]
    return [
        str(year),
        month_name,
        f"{month_name} {year}",
        f"T{quarter(reference.month)} {year}",
        f"Q{four_month_period(reference.month)} {year}",
        f"S{half_year(reference.month)} {year}",
    ]


def build_prompt(content: str, reference: date) -> str:
    """Build the instruction sent to the provider for ``content``."""
    escaped = content.replace('"', '\\"')
    return PROMPT_TEMPLATE.format(
        date_tags=", ".join(date_tags(reference)),
        content=escaped,
        date=reference.strftime("%Y-%m-%d"),
    )
