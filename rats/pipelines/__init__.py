"""
RATS Pipelines.

Business logic orchestration functions, one module per feature.
Routers import the module they need, e.g.
``from rats.pipelines import food as pipelines``.
"""
