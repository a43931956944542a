"""
app/query_generation package marker.
"""

from app.query_generation.generator import generate_queries, render_template
from app.query_generation.templates import QUERY_TEMPLATES, QueryTemplate

__all__ = [
    "QUERY_TEMPLATES",
    "QueryTemplate",
    "generate_queries",
    "render_template",
]
