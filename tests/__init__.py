"""
Test suite for the pygabor package.

This test suite covers:
- Import tests for all modules and submodules
- Unit tests for individual functions and classes
- Integration tests for complete workflows
- Taichi field output tests

Run with: pytest
"""
