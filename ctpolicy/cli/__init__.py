"""
Command-line interface for querying the CT enforcement policy.
"""
