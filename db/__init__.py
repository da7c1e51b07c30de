"""
db/ - Database Layer
====================
Handles PostgreSQL connections, schema initialization and the error kinds
raised by the persistence layer.
"""
