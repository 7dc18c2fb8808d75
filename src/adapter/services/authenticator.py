"""Static token authenticator

Maps configured bearer tokens to actors. Real identity providers plug in
behind the same Authenticator interface.
"""

from typing import Dict, Optional
from src.app.services.authenticator import Actor, Authenticator


class StaticTokenAuthenticator(Authenticator):
    def __init__(self, tokens: Dict[str, str]):
        """
        Args:
            tokens: token -> actor id
        """
        self.tokens = tokens or {}

    async def authenticate(self, token: str) -> Optional[Actor]:
        actor_id = self.tokens.get(token)
        if actor_id is None:
            return None
        return Actor(id=actor_id)
