__all__ = ("PreconditionError", "ParseError")


class PreconditionError(Exception): ...


class ParseError(PreconditionError): ...
