"""Domain layer for carledger application.

Services are imported from their own modules (for example
``carledger.domain.vehicle``) so that ``carledger.database`` can import the
entities without pulling the services in.
"""
