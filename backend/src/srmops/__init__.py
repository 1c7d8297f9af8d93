"""
SRM Ops - field operations records service

Stores intervention and reclamation records submitted by field staff,
emails a generated report for each one and exports records to spreadsheets.
"""

__version__ = "0.1.0"
