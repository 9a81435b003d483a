"""
Data access for the portal, one module per table.

Functions take the request's ``AsyncSession`` as their first argument,
flush when they write, and leave the commit to the caller (the route
handler for API requests, the scripts otherwise).
Domain failures surface as ``app.core.errors`` exceptions.
"""
