"""In-memory secret store: same contract as the keyring store, nothing leaves the process."""
from plantsnap.adapters.secrets.base import SecretStore

class InMemorySecretStore(SecretStore):
    def __init__(self):
        self._items: dict[tuple[str, str], str] = {}

    def get(self, service: str, account: str) -> str | None:
        return self._items.get((service, account))

    def set(self, service: str, account: str, value: str):
        self.delete(service, account)
        self._items[(service, account)] = value

    def delete(self, service: str, account: str):
        self._items.pop((service, account), None)
