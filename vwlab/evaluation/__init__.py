"""
Evaluation utilities for scalar learner predictions.
"""
