"""
Core utilities shared across the userhub package.

This package hosts configuration helpers, time utilities and password
hashing. Services and routers depend on these primitives instead of reading
os.environ or the clock directly.
"""
