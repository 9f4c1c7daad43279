"""
Prekey Router.
Accepts signed prekey bundles.
"""

from fastapi import APIRouter, Depends, Query, Request, Response, status

from keymesh_proxy.api.deps.providers import get_network_id, get_prekey_service
from keymesh_proxy.api.services.prekey_service import PrekeyService
from keymesh_proxy.core.logging import get_logger

logger = get_logger(__name__)

# Create router
router = APIRouter()


@router.put("/prekeys", status_code=status.HTTP_201_CREATED)
async def put_prekeys(
    request: Request,
    public_key: str = Query("", alias="publicKey", description="Hex Ed25519 public key"),
    network_id: int = Depends(get_network_id),
    service: PrekeyService = Depends(get_prekey_service),
) -> Response:
    """
    Store a prekey bundle signed by publicKey.

    The body is ``{"signature": <base64>, "prekeys": <string>}``.
    """
    body = await request.body()
    await service.put_prekeys(public_key, network_id, body)
    return Response(status_code=status.HTTP_201_CREATED)
