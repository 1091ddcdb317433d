"""Resolver package for the GraphQL schema.

Resolvers take the Strawberry ``info`` object, pull the data store out of the
context and convert store records into GraphQL types.
"""
