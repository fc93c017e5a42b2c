"""
Ranker - orders matched rules by how specific each rule is.
"""

from .specificity import rank_by_specificity, specificity

__all__ = ["rank_by_specificity", "specificity"]
