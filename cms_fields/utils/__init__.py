"""Utility helpers for CMS Fields."""
