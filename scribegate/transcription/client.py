"""TranscriptionClient — abstract base for speech-to-text backends."""
from abc import ABC, abstractmethod

from scribegate.models import TranscriptionRequest


class TranscriptionClient(ABC):

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    async def transcribe(self, request: TranscriptionRequest) -> tuple[str, ...]:
        """Return recognized segments in provider order (possibly empty).

        Raises ProviderError on any failure; never returns a partial result.
        """
        ...

    async def aclose(self) -> None:
        """Release pooled connections. Backends without any may keep this no-op."""
        return None
