"""Timetable grid model, projection and slot editing."""
