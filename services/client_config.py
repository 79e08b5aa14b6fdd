"""Public settings the front end needs to initialise its hosted backend SDK."""

from __future__ import annotations

from dataclasses import asdict, dataclass

CONFIG_KEYS = {
    'api_key': 'FIREBASE_API_KEY',
    'auth_domain': 'FIREBASE_AUTH_DOMAIN',
    'project_id': 'FIREBASE_PROJECT_ID',
    'storage_bucket': 'FIREBASE_STORAGE_BUCKET',
    'messaging_sender_id': 'FIREBASE_MESSAGING_SENDER_ID',
    'app_id': 'FIREBASE_APP_ID',
    'measurement_id': 'FIREBASE_MEASUREMENT_ID',
}


def _camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


@dataclass(frozen=True)
class ClientConfig:
    api_key: str = ''
    auth_domain: str = ''
    project_id: str = ''
    storage_bucket: str = ''
    messaging_sender_id: str = ''
    app_id: str = ''
    measurement_id: str = ''

    @classmethod
    def from_mapping(cls, config) -> 'ClientConfig':
        return cls(**{field: config.get(key) or '' for field, key in CONFIG_KEYS.items()})

    def is_valid(self) -> bool:
        return bool(self.api_key and self.project_id)

    def to_public_dict(self) -> dict:
        return {_camel(name): value for name, value in asdict(self).items()}
