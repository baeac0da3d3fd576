"""Code generator interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mailblocks.strategies.email_engine.models import EmailTemplate


class BaseCodeGenerator(ABC):
    """Abstract base class for emitting legacy template modules."""

    @abstractmethod
    def generate(self, template: "EmailTemplate") -> str:
        """Return the module source for ``template``.

        Raises:
            MalformedBlockError: If a block cannot be rendered.
        """

    @abstractmethod
    def module_filename(self, template: "EmailTemplate") -> str:
        """Return the file name the module is conventionally stored under."""
