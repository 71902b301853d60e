"""
analytics/ - Pure Computation Layer
====================================
Date normalization, week/month/year bucketing, aggregation, axis ordering
and insight generation. Every function here is a pure transformation of an
in-memory record snapshot: no I/O, no shared state between calls.
"""
