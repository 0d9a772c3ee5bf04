class OEError(Exception): ...


class TimestampError(OEError): ...


class NetworkError(OEError): ...


class IngestError(OEError): ...


class TableError(OEError): ...


class EmptyTableError(TableError): ...


def require(condition: bool, message: str, exc: type[OEError] = OEError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
