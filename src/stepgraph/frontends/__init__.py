"""Frontends - user interfaces on top of stepgraph.core."""
