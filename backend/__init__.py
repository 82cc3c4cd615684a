"""
Backend package for the products synchronizer.

This package wires a Firestore (or in-memory) document store to a live list
synchronizer and the headless controller of the products CRUD screen.
"""
