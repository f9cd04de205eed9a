"""
Skysweep Test Suite

Test organization:
- unit/ - Unit tests for individual components
- fixtures/ - Test data and mock responses
"""
