"""Heuristic entity and field matching."""

from modelbridge.matching.matcher import EntityMatch, EntityMatcher, field_names_of, operations_of

__all__ = ["EntityMatch", "EntityMatcher", "field_names_of", "operations_of"]
