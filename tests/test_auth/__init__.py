"""
Auth Module Tests
----------------
Test suite for JWT authentication.
Tests cover token issuance and verification, revocation, the auth service
and the HTTP flows built on them.
"""
