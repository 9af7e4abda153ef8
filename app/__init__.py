"""
Clinic Appointment System

A FastAPI-based service where patients book appointments with doctors,
doctors confirm or decline them, and admins see the whole schedule.
"""

__version__ = "1.0.0"
