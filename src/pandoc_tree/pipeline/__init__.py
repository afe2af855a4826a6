"""Conversion pipeline stages: dispatch, collection and assembly."""
