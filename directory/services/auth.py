from typing import Optional

from directory.services.api import ApiClient, unwrap


class AuthAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    def register(self, user_data: dict) -> dict:
        return self.client.post('/auth/register', user_data)

    def login(self, credentials: dict) -> dict:
        return self.client.post('/auth/login', credentials)

    def me(self) -> Optional[dict]:
        body = self.client.get('/auth/me')
        return unwrap(body, body.get('user') if isinstance(body, dict) else None)

    def update_location(self, coordinates: list) -> dict:
        return self.client.put('/auth/update-location', {'coordinates': coordinates})


def token_and_user(body: dict) -> tuple[Optional[str], Optional[dict]]:
    """Pull ``token`` and ``user`` from a login/register answer.

    They are found either at the top level or inside ``data``.
    """
    data = body.get('data') if isinstance(body.get('data'), dict) else {}
    token = body.get('token') or data.get('token')
    user = body.get('user') or data.get('user')
    if user is None and data:
        user = {k: v for k, v in data.items() if k != 'token'} or None
    return token, user
