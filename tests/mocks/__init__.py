"""Test doubles for flowdesk storage drivers."""
