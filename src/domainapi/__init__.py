"""domainapi: domain model to GraphQL API compiler."""

__version__ = "0.4.0"
