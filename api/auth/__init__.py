"""
Caller identity and ownership authorization.
"""
