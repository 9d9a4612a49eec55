"""
Test suite for the pageflow project.
"""
