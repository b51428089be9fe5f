"""
Place recommendations.

Responsibilities:
- Declare the controlled vocabulary (categories, tags, areas, needs).
- Validate travel plans and rank candidate places deterministically.
- Apply a bounded bias towards places endorsed by trusted connections.
- Orchestrate catalog, trust graph, LLM reasons and analytics per request.
"""
