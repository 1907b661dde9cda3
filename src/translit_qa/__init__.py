"""
translit-qa: Black-box validator for web transliteration services

Drives a hosted Singlish-to-Sinhala transliteration page through a real
browser, locates its input and output surfaces heuristically, and checks
the converted text against a corpus of scenarios with tolerant matching.
"""

__version__ = "0.1.0"
