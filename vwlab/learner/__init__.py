"""
Online learner adapter.

This subpackage includes:
- namespace / feature-name hashing
- scoped example builders and record-to-example assembly
- the OnlineLearner session (scikit-learn SGD under the hood)
"""
