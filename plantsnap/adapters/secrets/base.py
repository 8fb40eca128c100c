from abc import ABC, abstractmethod

class SecretStore(ABC):
    @abstractmethod
    def get(self, service: str, account: str) -> str | None:
        """Return the stored secret, or None if absent."""
        ...

    @abstractmethod
    def set(self, service: str, account: str, value: str):
        """Store value, replacing any existing entry for (service, account)."""
        ...

    @abstractmethod
    def delete(self, service: str, account: str):
        """Remove the entry. No-op if absent."""
        ...
