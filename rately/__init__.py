"""Rately: store rating API."""
