"""
Adapters layer - Local persistence and demo data.
"""

from .demo_data import demo_appointments_for
from .json_store import JsonAppointmentStore, JsonSessionStore

__all__ = ["JsonAppointmentStore", "JsonSessionStore", "demo_appointments_for"]
