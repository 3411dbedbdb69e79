"""
Word Crawler

Parallel, depth- and deadline-bounded web crawler that ranks the most
frequent words found on the pages it visits.
"""

__version__ = "1.0.0"
__description__ = "Parallel web crawler producing ranked word frequencies"
