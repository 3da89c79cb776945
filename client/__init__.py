"""client/ -- HTTP client for the catalog API.

Layer rule: client/ talks to the server over HTTP only. It does NOT import
from api/, auth/, catalog/, or core/ -- it must work against a remote
deployment with nothing but the wire contract.
"""
