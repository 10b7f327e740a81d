"""
HTTP routes for bonds under /api/v1. Handlers only wire the request onto BondController.
Request bodies are read raw so the access gate runs before any body decoding.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from bond_server.access import Claims
from bond_server.auth import get_claims
from bond_server.controller import BondController

router = APIRouter(prefix="/api/v1", tags=["bonds"])


def get_controller(request: Request) -> BondController:
    return request.app.state.controller


async def read_body(request: Request) -> bytes:
    return await request.body()


ControllerDep = Annotated[BondController, Depends(get_controller)]
ClaimsDep = Annotated[Claims, Depends(get_claims)]
BodyDep = Annotated[bytes, Depends(read_body)]


@router.get("/bonds")
def list_bonds(controller: ControllerDep):
    """All bonds. No authentication; an empty table is a 404."""
    return controller.list_bonds()


@router.get("/bond/{bond_id}")
def get_bond(bond_id: str, controller: ControllerDep):
    """One bond by ID. No authentication."""
    return controller.get_bond(bond_id)


@router.post("/bond")
def create_bond(claims: ClaimsDep, body: BodyDep, controller: ControllerDep):
    """Requires credential bond:create."""
    return controller.create_bond(claims, body)


@router.put("/bond", status_code=status.HTTP_201_CREATED)
def update_bond(claims: ClaimsDep, body: BodyDep, controller: ControllerDep):
    """Requires credential bond:update and that the caller created the bond."""
    return controller.update_bond(claims, body)


@router.delete("/bond", status_code=status.HTTP_204_NO_CONTENT)
def delete_bond(claims: ClaimsDep, body: BodyDep, controller: ControllerDep):
    """Requires credential bond:delete and that the caller created the bond."""
    controller.delete_bond(claims, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
