"""Service layer package.

Service classes are imported from their modules directly; the pure pricing
and catalog helpers are also used by the schema layer.
"""
