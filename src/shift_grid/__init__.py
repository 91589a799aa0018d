"""
Shift Grid - Assignment and Conflict Validation Engine

Assigns employees to half-hour slots at locations across a multi-day grid
and keeps every assignment free of double-booking, forbidden-hour and
team eligibility conflicts.
"""

__version__ = "1.0.0"
__author__ = "Shift Grid Team"
