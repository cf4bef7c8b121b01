"""Classifieds listing catalog: boards of postings keyed by group name."""
