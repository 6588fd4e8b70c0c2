"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold identity logic that spans the aggregate and its
    ports, such as translating storage conflicts into domain errors.
    """

    pass
