"""
Client for the external social proof lookup function.
The function returns the last proof event a wallet posted for a platform.
"""

import json
from typing import Optional

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)
from starlette.concurrency import run_in_threadpool

from keymesh_proxy.core.config import settings
from keymesh_proxy.core.exceptions import LookupTimeoutError, LookupUnavailableError
from keymesh_proxy.core.logging import get_logger
from keymesh_proxy.domain.models.authorization import PlatformName, SocialProofClaim
from keymesh_proxy.infrastructure.aws.session import create_client

logger = get_logger(__name__)


class LambdaSocialProofClient:
    """Invokes the lookup Lambda synchronously."""

    def __init__(self, function_name: Optional[str] = None):
        self.function_name = function_name or settings.SOCIAL_PROOF_LOOKUP_FUNCTION
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = create_client("lambda")
        return self._client

    async def get_last_proof(
        self, user_address: str, platform: PlatformName = PlatformName.TWITTER
    ) -> SocialProofClaim:
        """
        Fetch the pending social proof of a wallet.

        Args:
            user_address: Wallet address
            platform: Social platform of the proof

        Returns:
            SocialProofClaim with username and proof URL

        Raises:
            LookupTimeoutError: If the invocation times out
            LookupUnavailableError: If the function fails or returns no proof
        """
        payload = {"userAddress": user_address, "platform": platform.value}
        logger.info("Invoking social proof lookup", function=self.function_name, payload=payload)

        client = self._get_client()
        try:
            response = await run_in_threadpool(
                client.invoke,
                FunctionName=self.function_name,
                InvocationType="RequestResponse",
                Payload=json.dumps(payload).encode("utf-8"),
            )
            raw_payload = await run_in_threadpool(response["Payload"].read)
        except (ConnectTimeoutError, ReadTimeoutError) as e:
            logger.error(f"Social proof lookup timed out: {e}")
            raise LookupTimeoutError(details={"function": self.function_name})
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Social proof lookup failed: {e}")
            raise LookupUnavailableError(
                f"Social proof lookup failed: {e}", {"function": self.function_name}
            )

        if response.get("FunctionError"):
            logger.error(
                "Social proof lookup function error",
                function_error=response["FunctionError"],
                payload=raw_payload,
            )
            raise LookupUnavailableError(
                "Social proof lookup function returned an error",
                {"function_error": response["FunctionError"]},
            )

        logger.info("Social proof lookup result", payload=raw_payload)
        return self._parse_claim(user_address, raw_payload)

    def _parse_claim(self, user_address: str, raw_payload: bytes) -> SocialProofClaim:
        try:
            data = json.loads(raw_payload)
        except (TypeError, ValueError):
            raise LookupUnavailableError("Social proof lookup returned malformed JSON")

        if not isinstance(data, dict) or not data.get("username"):
            raise LookupUnavailableError(
                "No social proof found", {"user_address": user_address}
            )

        return SocialProofClaim(
            user_address=user_address,
            username=data["username"],
            proof_url=data.get("proofURL") or "",
        )


# Global lookup client instance
social_proof_client = LambdaSocialProofClient()
