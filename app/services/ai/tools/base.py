"""Tool base class — a capability the model may call mid-completion."""

from abc import ABC, abstractmethod
from typing import Any


class Tool(ABC):
    """A named, schema-described function the model can invoke.

    ``parameters`` is a JSON Schema object: it must declare ``type`` and
    ``properties``, and every property must declare its own ``type``.
    """

    name: str = ""
    description: str = ""

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        ...

    @property
    def requirements(self) -> dict[str, Any]:
        return {}

    @abstractmethod
    async def execute(self, params: dict[str, Any]) -> Any:
        """Run the tool. The returned value must be JSON-serialisable."""
