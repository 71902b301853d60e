"""
handlers/ - Presentation Layer
================================
Telegram command handlers. Each handler parses the command arguments,
delegates to the appropriate Service, and replies to the user.
No business logic lives here.
"""
