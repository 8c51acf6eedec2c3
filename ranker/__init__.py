"""Collaborative video ranking backend."""
