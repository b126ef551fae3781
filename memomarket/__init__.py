"""
Local persistence backend for the MemoMarket desktop application.

Rule packs, the application config and the installed-pack list live as JSON
documents under a per-application configuration directory. The
``services.memochat`` module translates packs to and from the MemoChat format.
"""

__version__ = "0.1.0"
