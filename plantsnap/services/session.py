from typing import Optional
from plantsnap.adapters.secrets.base import SecretStore
from plantsnap.services.observable import Observable

SERVICE = "openai_api_key"
ACCOUNT = "user"


class SessionState(Observable):
    """Process-wide auth state: the saved API key, mirrored to the secret store.

    ``is_authenticated`` is derived from ``secret`` and never stored on its own.
    No key validation happens here; callers validate before ``save``.
    """

    def __init__(self, store: SecretStore, status_store):
        super().__init__()
        self.store = store
        self.status = status_store
        self.secret: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.secret is not None

    def initialize(self):
        self._update(self.store.get(SERVICE, ACCOUNT))
        self.status.log(f"session: initialized authenticated={self.is_authenticated}")

    def save(self, key: str):
        self.store.set(SERVICE, ACCOUNT, key)
        self._update(key)
        self.status.log("session: api key saved")

    def clear(self):
        self.store.delete(SERVICE, ACCOUNT)
        self._update(None)
        self.status.log("session: api key cleared")

    def _update(self, secret: Optional[str]):
        was = self.is_authenticated
        if secret == self.secret:
            return
        self.secret = secret
        self._publish("secret", secret)
        if self.is_authenticated != was:
            self._publish("is_authenticated", self.is_authenticated)
