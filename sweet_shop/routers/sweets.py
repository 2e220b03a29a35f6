# sweet_shop/routers/sweets.py
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from sweet_shop.deps import (
    get_catalog,
    get_current_user,
    get_inventory,
    get_management,
    require_role,
    valid_sweet_id,
)
from sweet_shop.models.response import ApiResponse
from sweet_shop.models.sweet import PurchaseRequest, RestockRequest, SweetCreate, SweetUpdate
from sweet_shop.models.user import RoleType
from sweet_shop.services.catalog import CatalogService
from sweet_shop.services.inventory import InventoryService
from sweet_shop.services.management import ManagementService

router = APIRouter(prefix="/api/sweets", tags=["sweets"])

admin_only = [Depends(require_role(RoleType.ADMIN))]

# ---- Catalog (static paths before /{sweet_id}) ----
@router.get("", response_model=ApiResponse)
async def list_sweets(catalog: CatalogService = Depends(get_catalog)):
    return ApiResponse(message="Sweets retrieved successfully", data=await catalog.list_sweets())

@router.get("/search", response_model=ApiResponse)
async def search_sweets(
    name: Optional[str] = None,
    category: Optional[str] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, gt=0),
    catalog: CatalogService = Depends(get_catalog),
):
    sweets = await catalog.search(name=name, category=category, min_price=min_price, max_price=max_price)
    return ApiResponse(message="Success", data=sweets)

@router.get("/available", response_model=ApiResponse, dependencies=[Depends(get_current_user)])
async def list_available(catalog: CatalogService = Depends(get_catalog)):
    return ApiResponse(message="Success", data=await catalog.list_available())

@router.get("/not-available", response_model=ApiResponse, dependencies=[Depends(get_current_user)])
async def list_out_of_stock(catalog: CatalogService = Depends(get_catalog)):
    return ApiResponse(message="Success", data=await catalog.list_out_of_stock())

@router.get("/{sweet_id}", response_model=ApiResponse)
async def get_sweet(sweet_id: str = Depends(valid_sweet_id), catalog: CatalogService = Depends(get_catalog)):
    return ApiResponse(message="Sweet retrieved successfully", data=await catalog.get_sweet(sweet_id))

# ---- Management ----
@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED, dependencies=admin_only)
async def add_sweet(item: SweetCreate, management: ManagementService = Depends(get_management)):
    created = await management.add_sweet(item.to_sweet())
    return ApiResponse(message="Sweet Added Successfully", data=created)

@router.put("/{sweet_id}", response_model=ApiResponse, dependencies=admin_only)
async def update_sweet(
    sweet_id: str = Depends(valid_sweet_id),
    changes: Optional[SweetUpdate] = Body(None),
    management: ManagementService = Depends(get_management),
):
    updated = await management.update_sweet(sweet_id, changes)
    return ApiResponse(message="Sweet Updated Successfully", data=updated)

@router.delete("/{sweet_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=admin_only)
async def delete_sweet(sweet_id: str = Depends(valid_sweet_id), management: ManagementService = Depends(get_management)):
    await management.delete_sweet(sweet_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ---- Stock ----
@router.post("/{sweet_id}/purchase", response_model=ApiResponse, dependencies=[Depends(require_role(RoleType.USER))])
async def purchase_sweet(
    payload: PurchaseRequest,
    sweet_id: str = Depends(valid_sweet_id),
    inventory: InventoryService = Depends(get_inventory),
):
    sold = await inventory.purchase(sweet_id, payload.quantity)
    return ApiResponse(message="Sweet Purchased Successfully", data=sold)

@router.post("/{sweet_id}/restock", response_model=ApiResponse, dependencies=admin_only)
async def restock_sweet(
    payload: RestockRequest,
    sweet_id: str = Depends(valid_sweet_id),
    inventory: InventoryService = Depends(get_inventory),
):
    restocked = await inventory.restock(sweet_id, payload.quantity)
    return ApiResponse(message="Sweet Restocked Successfully", data=restocked)
