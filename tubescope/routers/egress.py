from fastapi import APIRouter, Depends

from tubescope.client import InnertubeClient, get_client
from tubescope.models.common import EgressStatus

router = APIRouter(prefix="/api/egress", tags=["egress"])


def _status(client: InnertubeClient) -> EgressStatus:
    address = client.local_address
    return EgressStatus(target_host=client.target_host, local_address=str(address) if address else None)


@router.get("")
def egress_status(client: InnertubeClient = Depends(get_client)) -> EgressStatus:
    return _status(client)


@router.post("/rotate")
async def rotate(client: InnertubeClient = Depends(get_client)) -> EgressStatus:
    await client.rotate()
    return _status(client)
