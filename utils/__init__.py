"""Utility helpers for the membership wizard."""
