"""Exceptions raised by the workflow compiler."""


class StructuralError(Exception):
    """A workflow is not shaped like something the compiler can handle."""

    def __init__(self, message: str, node_id: str | None = None):
        self.message = message
        self.node_id = node_id
        super().__init__(message)


class MissingClassTypeError(StructuralError):
    def __init__(self, node_id: str):
        super().__init__(f"Node {node_id} is missing class_type property", node_id=node_id)


class InvalidInputsError(StructuralError):
    def __init__(self, node_id: str):
        super().__init__(f"Node {node_id} has invalid inputs (must be an object)", node_id=node_id)


class UnsupportedFormatError(StructuralError):
    def __init__(self, message: str = "Unsupported workflow format"):
        super().__init__(message)


class InvalidPathError(ValueError):
    pass


class TemplateNotFoundError(KeyError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Workflow "{name}" not found in registry')
