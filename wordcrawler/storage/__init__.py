"""
Result output for the word crawler.
"""

from .result_writer import ResultWriter, ResultWriteError

__all__ = ['ResultWriter', 'ResultWriteError']
