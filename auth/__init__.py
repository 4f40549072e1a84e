"""
auth — User authentication module.

Provides:
  • Signed session-token creation & verification
  • Password hashing (bcrypt)
  • ``AuthService``: register / login / logout / resolve
  • ``require_auth`` FastAPI dependency
"""
