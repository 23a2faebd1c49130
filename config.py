import logging
import os
from dataclasses import dataclass
from typing import Optional

_TRUE = ('1', 'true', 'yes', 'on')
_LOG_LEVELS = ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG')


def _env_flag(environ, name, default=False):
    raw = environ.get(name)
    if raw is None or raw == '':
        return default
    return raw.strip().lower() in _TRUE


def _log_level(raw):
    level = (raw or 'INFO').strip().upper()
    if level not in _LOG_LEVELS:
        logging.getLogger(__name__).warning('Unknown LOG_LEVEL %r, using INFO', raw)
        return 'INFO'
    return level


@dataclass(frozen=True)
class Config:
    port: int = 5000
    log_level: str = 'INFO'
    store_backend: str = 'firestore'
    store_required: bool = False
    store_demo: bool = False
    app_id: str = 'default-app-id'
    firebase_project_id: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_private_key: Optional[str] = None

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            port=int(env.get('PORT', 5000)),
            log_level=_log_level(env.get('LOG_LEVEL')),
            store_backend=env.get('MANIFEST_STORE', 'firestore').strip().lower(),
            store_required=_env_flag(env, 'MANIFEST_STORE_REQUIRED'),
            store_demo=_env_flag(env, 'MANIFEST_STORE_DEMO'),
            app_id=env.get('MANIFEST_APP_ID', 'default-app-id'),
            firebase_project_id=env.get('FIREBASE_PROJECT_ID') or None,
            firebase_client_email=env.get('FIREBASE_CLIENT_EMAIL') or None,
            firebase_private_key=env.get('FIREBASE_PRIVATE_KEY') or None,
        )

    def firebase_credentials(self):
        """Service-account dict for firebase_admin, or None if anything is unset."""
        if not (self.firebase_project_id and self.firebase_client_email and self.firebase_private_key):
            return None
        return {
            'type': 'service_account',
            'project_id': self.firebase_project_id,
            'client_email': self.firebase_client_email,
            # env vars usually carry the PEM with escaped newlines
            'private_key': self.firebase_private_key.replace('\\n', '\n'),
            'token_uri': 'https://oauth2.googleapis.com/token',
        }
