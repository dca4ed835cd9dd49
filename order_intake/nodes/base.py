from abc import ABC, abstractmethod

from order_intake.core.workflow_state import IntakeState


class BaseNode(ABC):
    """Base class for all workflow nodes.

    Subclasses must set `name` as a class variable (str) and implement `__call__`.
    """

    name: str

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not getattr(cls, "name", None) and "Abstract" not in cls.__name__:
            raise TypeError(f"{cls.__name__} must define a 'name' class variable")

    @abstractmethod
    def __call__(self, state: IntakeState) -> dict:
        """Execute node logic. Returns a dict that updates the state."""
        ...

    def visited(self, state: IntakeState) -> list[str]:
        return state.get("trajectory", []) + [self.name]
