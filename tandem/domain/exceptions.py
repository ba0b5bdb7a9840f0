"""Exceptions raised by projections."""


class ProjectionError(Exception):
    """Base class for errors raised by the projection machinery itself.

    Failures raised by leaf effects are never wrapped in this type; they
    propagate through composites unchanged.
    """

    pass


class ProjectionNotDefinedError(ProjectionError):
    """Raised when ``dispatch`` is called for an event the projection does not handle.

    Use ``on_event`` to feed events unconditionally, or check
    ``is_defined_for`` before calling ``dispatch`` directly.
    """

    def __init__(self, projection: object, event: object):
        self.projection = projection
        self.event = event
        super().__init__(
            f"{type(projection).__name__} is not defined for event "
            f"{type(event).__name__}"
        )
