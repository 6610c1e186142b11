"""
Test suite for the coverpack project.
"""
