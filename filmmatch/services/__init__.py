"""Service layer: CRUD and feed logic over the async session.

Every function takes the ``AsyncSession`` first so it can be called from
API handlers, the seed script, or tests alike.
"""
