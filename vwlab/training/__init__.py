"""
Training pipelines.

This subpackage includes the end-to-end online-learning demo.
"""
