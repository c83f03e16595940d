"""Service layer: path resolution, detail loading, rendering, and queries.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
