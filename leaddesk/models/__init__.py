"""
Database models - import all models here so Base.metadata sees every table.
"""
from leaddesk.models.lead import Lead

__all__ = [
    "Lead",
]
