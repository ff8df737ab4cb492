"""
Data access layer.

Design rules:
- Views call ONLY functions in this package.
- Every remote read is wrapped so it can fall back to the static sample dataset.
- Missing Supabase credentials are a supported mode, checked before any network access.
- No env var reads here (config-only).
"""
