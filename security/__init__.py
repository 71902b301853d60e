"""
security/ - Access Control
===========================
Allow-list authorization and per-user rate limiting decorators.
"""
