class ProjectionError(Exception):
    """Base class for allocation and simulation errors."""


class InvalidInput(ProjectionError, ValueError):
    """The caller supplied inputs that can never be valid."""


class InvalidAllocationInput(InvalidInput):
    pass


class InvalidSimulationInput(InvalidInput):
    pass


class AllocationError(ProjectionError):
    """Valid inputs for which no allocation can be produced."""


class UnachievableVolatility(AllocationError):
    pass


class DegenerateSharpeWeights(AllocationError):
    pass
