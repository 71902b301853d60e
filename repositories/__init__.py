"""
repositories/ - Data Access Layer
==================================
Each repository owns the SQL for one table and returns domain model
objects. Every expense query is scoped by owner.
"""
