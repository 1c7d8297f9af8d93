"""Unit tests for report display labels."""

from datetime import datetime

from srmops.reporting.labels import (
    format_date_fr,
    format_timestamp_fr,
    priority_label,
    reclamation_category_label,
    status_label,
)


class TestLabels:
    def test_known_values_are_translated(self):
        assert priority_label("High") == "Élevée"
        assert status_label("Pending") == "En Attente"
        assert reclamation_category_label("water_leak") == "Fuite d'eau"

    def test_unknown_values_fall_back_to_raw(self):
        assert priority_label("Urgent") == "Urgent"
        assert reclamation_category_label("Odeur suspecte") == "Odeur suspecte"


class TestDates:
    def test_long_french_date(self):
        assert format_date_fr(datetime(2025, 3, 5, 14, 30)) == "5 mars 2025"
        assert format_date_fr(datetime(2024, 8, 15)) == "15 août 2024"

    def test_missing_date(self):
        assert format_date_fr(None) == "Non spécifiée"
        assert format_date_fr(None, default="N/A") == "N/A"

    def test_timestamp(self):
        assert format_timestamp_fr(datetime(2025, 3, 5, 14, 30)) == "05/03/2025 à 14:30"
