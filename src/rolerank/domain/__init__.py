"""Domain layer for RoleRank.

Entities and services here have no dependency on the persistence layer.
"""
