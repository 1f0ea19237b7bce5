"""
Example applications built on rollwallet
"""
