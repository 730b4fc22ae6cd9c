"""Persistence for futuresim."""
