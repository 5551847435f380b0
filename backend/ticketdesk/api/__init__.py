"""
HTTP routers. Each module exposes a `router` mounted under the API prefix.
"""
