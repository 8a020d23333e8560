from dataclasses import dataclass


@dataclass
class AttrUtilError(Exception):
    """Base class for all attrutil errors"""
    pass


@dataclass
class AbstractMethodError(AttrUtilError, NotImplementedError):
    name: str
    filename: str
    lineno: int

    def __str__(self) -> str:
        return f"call to abstract method {self.name} at {self.filename} line {self.lineno}."


@dataclass
class UndefinedSubroutineError(AttrUtilError, LookupError):
    name: str

    def __str__(self) -> str:
        return f"Undefined subroutine {self.name} called"


@dataclass
class UnresolvableNameError(AttrUtilError, LookupError):
    name: str

    def __str__(self) -> str:
        return f"Cannot resolve '{self.name}' to a function"


@dataclass
class InvalidAttributeError(AttrUtilError):
    slot: str
    attribute: str

    def __str__(self) -> str:
        return f"Invalid {self.slot.upper()} attribute: {self.attribute}"


@dataclass
class HooksInUseError(AttrUtilError, RuntimeError):
    def __str__(self) -> str:
        return "another open context already owns the signal and warning hooks"
