"""
Test suite for textquill.
"""
