"""Library Seats package.

Feature modules (students, seats, shifts, memberships, ...) with a thin Flask
controller layer over service classes and repository protocols.
"""
