"""
Platform secret store backed by the `keyring` package.

keyring picks the OS credential facility (macOS Keychain, Windows Credential
Locker, Secret Service on Linux), so the key is encrypted at rest by the
platform and never lands in app files.
"""
import keyring
from keyring.errors import KeyringError, PasswordDeleteError
from plantsnap.adapters.secrets.base import SecretStore


class KeyringSecretStore(SecretStore):
    def __init__(self, status_store):
        self.status = status_store

    def get(self, service: str, account: str) -> str | None:
        try:
            return keyring.get_password(service, account)
        except KeyringError as e:
            # access denied / no backend: treat as no saved key
            self.status.log(f"keyring_store: read failed ({type(e).__name__}), treating as absent")
            return None

    def set(self, service: str, account: str, value: str):
        previous = self.get(service, account)
        # Remove any existing item first to avoid duplicates
        self.delete(service, account)
        try:
            keyring.set_password(service, account, value)
        except KeyringError:
            if previous is not None:
                self.status.log("keyring_store: write failed, restoring previous key")
                keyring.set_password(service, account, previous)
            raise

    def delete(self, service: str, account: str):
        try:
            keyring.delete_password(service, account)
        except PasswordDeleteError:
            pass
