"""
Manuscripts feature.

Tracks sequential versions of a manuscript file per project and branch,
scores the similarity between consecutive versions, derives semantic
version labels and renders word-level diffs.
"""
