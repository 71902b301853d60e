"""
services/ - Business Layer
===========================
Validation and orchestration between handlers, repositories, the live
feed and the pure analytics core.
"""
