"""
Data cleaning module for the Location Hub.

Provides deterministic normalization for location names entered by admins
and searchers.
"""

from .name_cleaner import clean_location_name, normalize_unicode, suggest_names

__all__ = ['clean_location_name', 'normalize_unicode', 'suggest_names']
