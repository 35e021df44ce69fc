"""Authentication and authorization.

Learn: one authentication path. Users sign up with username/email/password,
log in with username/password, and receive a one-hour JWT access token.
Protected routes resolve that token to a CurrentIdentity, and every goal
query is scoped by its user_id.
"""
