"""
Cat resource: schemas, persistence and HTTP endpoints.
"""
