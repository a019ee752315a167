"""
Halo Leads backend.
"""
