"""Adapters connecting the domain ports to Wikimedia services and local files."""
