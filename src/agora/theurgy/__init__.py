"""
Theurgy - Application flows and their CLI commands.

- submit: List a product (createProduct transaction)
- fetch:  Read a product record (getProduct call)
"""
