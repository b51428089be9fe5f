"""
Place reviews.

Responsibilities:
- Validate review submissions against the rating and tag vocabulary.
- Store reviews in memory and aggregate them per place and per user.
"""
