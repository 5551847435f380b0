"""
Service layer: access policy, ticket lifecycle, pagination and the
services that orchestrate them over the DAOs.
"""
