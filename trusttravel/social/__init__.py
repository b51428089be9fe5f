"""
Trust graph.

Responsibilities:
- Store directed trust links between users.
- Snapshot the graph around one user, with the places their connections reviewed.
"""
