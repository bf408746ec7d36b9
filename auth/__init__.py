"""auth/ -- Authentication and authorization package for QuoraLite.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or qa/.
api/ and qa/ import from auth/, not the other way around.
"""
