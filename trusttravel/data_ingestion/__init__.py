"""
Place data ingestion.

Responsibilities:
- Read a raw place export (JSON records with loosely named columns).
- Normalize it into the canonical catalog schema and vocabulary.
- Persist the cleaned catalog CSV the place catalog loads at startup.
"""
