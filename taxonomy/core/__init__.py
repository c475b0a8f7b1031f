"""
Core infrastructure for the Ideas Taxonomy: paths, logging, exceptions and
shared CLI helpers.
"""
