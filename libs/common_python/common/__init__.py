"""Shared helpers for services and jobs in this repository."""
