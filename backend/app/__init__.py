"""Shelter adoption service — applications, reviews, and animal availability.

Invariants:
    - Importing the package runs nothing: no engine, no settings, no app object

Design Decisions:
    - Layers import inward only: api → services → core; infrastructure and models
      are reached from services and api, never from core
"""
