from recordseal_core.errors import RecordSealError


class TransportError(RecordSealError):
    pass


class TransportPermanentError(TransportError):
    """The server answered, but not with something this client can use."""
