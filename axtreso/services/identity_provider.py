# AXTRESO/backend/axtreso/services/identity_provider.py : connexion par identité externe (OAuth)

import logging
from dataclasses import dataclass
from typing import Optional

import aiohttp

from axtreso.config import OAUTH_SERVER_URL, APP_ID, OAUTH_TIMEOUT_SECONDS
from axtreso.errors import Unauthorized, ServiceUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExternalIdentity:
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None


class IdentityProvider:
    """Échange un code d'autorisation contre l'identité de l'utilisateur"""

    async def exchange(self, code: str, redirect_uri: str) -> ExternalIdentity:
        raise NotImplementedError


class OAuthIdentityProvider(IdentityProvider):
    """Fournisseur OAuth2 : code -> jeton d'accès -> profil utilisateur"""

    def __init__(self, server_url: str = OAUTH_SERVER_URL, client_id: str = APP_ID,
                 timeout: int = OAUTH_TIMEOUT_SECONDS):
        self.server_url = server_url.rstrip("/")
        self.client_id = client_id
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def exchange(self, code, redirect_uri):
        if not self.server_url:
            raise ServiceUnavailable("Serveur OAuth non configuré")

        try:
            profile = await self._fetch_profile(code, redirect_uri)
        except aiohttp.ClientError as e:
            logger.error(f"❌ Serveur OAuth injoignable: {e}")
            raise ServiceUnavailable("Serveur OAuth injoignable")

        open_id = profile.get("open_id") or profile.get("sub")
        if not open_id:
            raise Unauthorized("Identité externe introuvable")
        return ExternalIdentity(open_id=str(open_id), name=profile.get("name"), email=profile.get("email"))

    async def _fetch_profile(self, code, redirect_uri):
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(f"{self.server_url}/oauth/token", json={
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "code": code,
                "redirect_uri": redirect_uri,
            }) as response:
                if response.status != 200:
                    logger.warning(f"⚠️ Échange du code OAuth refusé: HTTP {response.status}")
                    raise Unauthorized("Code d'autorisation invalide")
                token = (await response.json()).get("access_token")

            if not token:
                raise Unauthorized("Code d'autorisation invalide")

            async with session.get(
                f"{self.server_url}/oauth/userinfo",
                headers={"Authorization": f"Bearer {token}"},
            ) as response:
                if response.status != 200:
                    logger.warning(f"⚠️ Profil OAuth indisponible: HTTP {response.status}")
                    raise Unauthorized("Identité externe introuvable")
                return await response.json()


def get_identity_provider() -> IdentityProvider:
    """Dépendance FastAPI : fournisseur d'identité externe"""
    return OAuthIdentityProvider()
