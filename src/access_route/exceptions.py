"""
Custom exceptions for the accessible route planner
"""


class AccessRouteError(Exception):
    """Base exception for the route planner"""

    pass


class InvalidCoordinatesError(AccessRouteError, ValueError):
    """Raised when a coordinate is NaN, infinite or out of range"""

    pass


class SearchCancelled(AccessRouteError):
    """Raised when a search is aborted by its cancel signal"""

    def __init__(self, expansions: int):
        super().__init__(f"search cancelled after {expansions} expansions")
        self.expansions = expansions
