"""
Top-level package for the vwlab online-learning demo.

This package contains modules for:
- loading the toy document dataset and its configuration
- tokenization and term-frequency feature extraction
- an explicit field -> namespace feature schema
- a scikit-learn backed online learner with example builders and sessions
- evaluation helpers and the end-to-end demo pipeline
"""
