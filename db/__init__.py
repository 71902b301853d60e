"""
db/ - Database Layer
====================
PostgreSQL connection pooling and schema initialization for the expense
store. This layer is the lowest in the architecture and has no
dependencies on other layers.
"""
