#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Utility functions for mhtml2html."""
