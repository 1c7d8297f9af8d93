"""Display labels used in generated reports.

Lookups fall back to the raw value when no label is known.
"""

from datetime import datetime

PRIORITY_LABELS = {
    "Low": "Basse",
    "Medium": "Moyenne",
    "High": "Élevée",
    "Critical": "Critique",
}

STATUS_LABELS = {
    "Pending": "En Attente",
    "In Progress": "En Cours",
    "Completed": "Terminé",
    "Cancelled": "Annulé",
}

RECLAMATION_CATEGORY_LABELS = {
    "water_leak": "Fuite d'eau",
    "water_cut": "Coupure d'eau",
    "low_pressure": "Faible pression",
    "water_quality": "Qualité de l'eau",
    "power_outage": "Coupure d'électricité",
    "meter": "Compteur défectueux",
    "sanitation": "Assainissement",
    "billing": "Facturation",
    "other": "Autre",
}

FRENCH_MONTHS = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)


def priority_label(priority: str) -> str:
    return PRIORITY_LABELS.get(priority, priority)


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def reclamation_category_label(category: str) -> str:
    return RECLAMATION_CATEGORY_LABELS.get(category, category)


def format_date_fr(value: datetime | None, default: str = "Non spécifiée") -> str:
    """Format a date the French long way, e.g. ``5 mars 2025``."""
    if value is None:
        return default
    return f"{value.day} {FRENCH_MONTHS[value.month - 1]} {value.year}"


def format_timestamp_fr(value: datetime) -> str:
    """Format a timestamp as ``05/03/2025 à 14:30``."""
    return value.strftime("%d/%m/%Y à %H:%M")
