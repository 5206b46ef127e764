"""Opportunity tracker API: opportunities, notes and next steps over a relational store."""

__version__ = "1.0.0"
