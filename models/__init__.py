"""Pydantic models for membership applications."""

from .membership import MembershipApplication

__all__ = ["MembershipApplication"]
