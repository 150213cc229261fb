"""
Server services: password hashing and tokens, FastAPI dependencies for
authentication and repositories, and PDF export of reports.
"""
