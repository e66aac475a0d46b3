"""PECC-TIME package.

Organized by feature modules (users, time_entries, submissions) with a thin Flask
controller layer for the CRUD server, and a client-side core (storage, remote,
gateway, session) that keeps working when the server is unreachable.
"""
