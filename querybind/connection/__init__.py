"""
Connection acquisition for querybind.

Connections are owned by the caller; the core only borrows one for the
duration of a call. Import from querybind.connection.dbconn.
"""
