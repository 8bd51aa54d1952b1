"""Domain layer for finledger.

Services are imported from their modules (``finledger.domain.debt`` etc.);
the database layer imports ``finledger.domain.entities`` and must not pull
the services in through this package.
"""
