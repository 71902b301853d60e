"""
models/ - Domain Layer
=======================
The expense record, the fixed category list and the raw date shapes.
"""
