"""Shared plumbing: traversal, reference rewriting, removal/archiving."""
