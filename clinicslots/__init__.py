"""
clinicslots - clinic appointment booking with naive slot suggestions.
"""

__version__ = "0.1.0"
