class RestModelError(Exception):
    pass


class PathError(RestModelError):
    """
    A request path could not be built because a placeholder in the path
    template had no value, for example `/users/:id` for a user that was
    never saved.
    """

    def __init__(self, message=None, missing=None):
        super().__init__(message)
        self.message = message
        self.missing = missing


class UnknownModelError(RestModelError):
    """
    An association refers to a model class by name, and no such model
    has been defined by the time the association is first used.
    """

    def __init__(self, name, nearby=None):
        where = f' (looked up from {nearby.__module__}.{nearby.__qualname__})' if nearby else ''
        super().__init__(f'No model named "{name}" is known{where}')
        self.name = name


class ConfigurationError(RestModelError):
    pass
