"""
Library Desk Test Suite
"""
