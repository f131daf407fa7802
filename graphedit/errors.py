"""Error codes and exceptions.

Expected validation failures are reported through result objects carrying one
of the codes below. Exceptions are reserved for corrupt input and for the
store boundary.
"""

# Node identity
DUPLICATE_ID = "DuplicateId"
EMPTY_ID = "EmptyId"
NODE_NOT_FOUND = "NodeNotFound"
INVALID_LAYER = "InvalidLayer"

# Edge operations
SAME_ENDPOINT = "SameEndpoint"
MISSING_ENDPOINT = "MissingEndpoint"
INVALID_DIRECTION = "InvalidDirection"
EDGE_NOT_FOUND = "EdgeNotFound"
INVALID_WEIGHT = "InvalidWeight"

# Graph metadata
INVALID_TYPE = "InvalidType"

# Analytics queries
NO_PATH = "NoPath"
UNKNOWN_NODE = "UnknownNode"

# Access
READ_ONLY_ACCESS = "ReadOnlyAccess"


class GraphFormatError(ValueError):
    """A graph document does not have the expected shape."""


class GraphNotFoundError(LookupError):
    """No stored graph exists for the requested id."""


class ReadOnlyAccessError(PermissionError):
    """A write was attempted with viewer access."""

    code = READ_ONLY_ACCESS
