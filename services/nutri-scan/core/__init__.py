"""
Core modules for the Nutri Scan Lambda functions.
"""
