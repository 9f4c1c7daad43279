"""
Verification Service Layer.
Links a wallet address to a Twitter identity once a social proof is found.
"""

from datetime import datetime, timezone
from typing import Optional

from keymesh_proxy.core.exceptions import ValidationError
from keymesh_proxy.core.logging import get_logger, log_social_verification
from keymesh_proxy.core.network import is_private_network
from keymesh_proxy.domain.models.authorization import (
    AuthorizationRecord,
    PlatformName,
    SocialProofClaim,
)
from keymesh_proxy.domain.repositories.authorization_repository import (
    AuthorizationRepositoryRegistry,
    authorization_registry,
)
from keymesh_proxy.domain.repositories.twitter_oauth_repository import (
    TwitterOAuthRepository,
    twitter_oauth_repository,
)
from keymesh_proxy.infrastructure.aws.social_proof_client import (
    LambdaSocialProofClient,
    social_proof_client,
)

logger = get_logger(__name__)


class VerificationService:
    """Service class for the Twitter verify workflow."""

    def __init__(
        self,
        registry: AuthorizationRepositoryRegistry = authorization_registry,
        twitter_repository: TwitterOAuthRepository = twitter_oauth_repository,
        lookup_client: LambdaSocialProofClient = social_proof_client,
    ):
        self.registry = registry
        self.twitter_repository = twitter_repository
        self.lookup_client = lookup_client

    async def verify_twitter(
        self,
        user_address: str,
        network_id: int,
        claim: Optional[SocialProofClaim] = None,
    ) -> AuthorizationRecord:
        """
        Verify a wallet's Twitter proof and persist the authorization.

        On private networks a claim supplied by the caller is trusted as-is;
        otherwise the pending proof is fetched from the lookup function.

        Args:
            user_address: Wallet address being verified
            network_id: Ethereum network partition
            claim: Caller supplied username and proof URL, if any

        Returns:
            The stored AuthorizationRecord

        Raises:
            ValidationError: If user_address is empty
            LookupUnavailableError: If no proof can be fetched
            LookupTimeoutError: If the lookup times out
            DatabaseError: If reading the profile or writing the record fails
        """
        if not user_address:
            raise ValidationError("userAddress must be set")

        if is_private_network(network_id) and self._is_complete(claim):
            logger.info(
                "Using caller supplied social proof",
                user_address=user_address,
                network_id=network_id,
            )
        else:
            claim = await self.lookup_client.get_last_proof(
                user_address, PlatformName.TWITTER
            )

        profile = await self.twitter_repository.get_profile(claim.username)
        if profile is None:
            logger.warning(
                "No stored Twitter profile for claimed username",
                username=claim.username,
                user_address=user_address,
            )

        repository = await self.registry.get(network_id)
        record = await repository.put_authorization(
            AuthorizationRecord(
                user_address=user_address,
                platform_name=PlatformName.TWITTER,
                username=claim.username,
                proof_url=claim.proof_url,
                verified=True,
                verified_at=datetime.now(timezone.utc),
            )
        )

        log_social_verification(
            platform=PlatformName.TWITTER.value,
            username=claim.username,
            wallet_address=user_address,
            network_id=network_id,
            status="verified",
            profile_found=profile is not None,
        )

        return record

    @staticmethod
    def _is_complete(claim: Optional[SocialProofClaim]) -> bool:
        return claim is not None and bool(claim.username) and bool(claim.proof_url)


# Global service instance
verification_service = VerificationService()
