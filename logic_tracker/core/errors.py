from __future__ import annotations


class LogicDataError(ValueError):
    """Base class for malformed or inconsistent static game-logic data."""


class ContentValidationError(LogicDataError):
    def __init__(self, message: str, details: list[str] | None = None) -> None:
        self.details = details or []
        suffix = "\n".join(self.details)
        super().__init__(f"{message}\n{suffix}" if suffix else message)


class UnknownRequirementError(LogicDataError):
    def __init__(self, requirement: object, context: str | None = None) -> None:
        self.requirement = requirement
        self.context = context
        message = f"Could not parse requirement: {requirement}"
        super().__init__(f"{message} ({context})" if context else message)


class RequirementFormatError(LogicDataError):
    def __init__(self, node: object) -> None:
        self.node = node
        super().__init__(f"Invalid requirements: {node!r}")


class RequirementCycleError(LogicDataError):
    def __init__(self, chain: list[tuple[str, str]]) -> None:
        self.chain = chain
        path = " -> ".join(f"{general}/{detailed}" for general, detailed in chain)
        super().__init__(f"Cross-location requirements form a cycle: {path}")


class UnknownLocationError(KeyError):
    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind} '{name}'.")

    def __str__(self) -> str:
        return str(self.args[0])
