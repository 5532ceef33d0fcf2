"""Shared Kernel module.

Building blocks that do not belong to one bounded context: the observation
context carried by probes, opaque pagination cursors, and the auth
primitives (JWT pairs, provider token encryption, the OAuth client).
Bounded contexts import from here; nothing here imports a bounded context.
"""
