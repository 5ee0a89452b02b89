"""
House Hunt API: rental listings for property owners and tenants.
"""
