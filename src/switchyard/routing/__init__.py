"""Routing: a route table built once at startup, then read-only.

Static routes resolve by dict lookup; dynamic routes are packed into
combined regex chunks for matching and reversed for URL generation.
"""
