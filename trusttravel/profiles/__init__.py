"""
User profile layer.

Responsibilities:
- Model the long-term travel preferences collected at onboarding.
- Keep profiles keyed by user id (last write wins).
- Score how complete a profile is and suggest the next field to fill.
"""
