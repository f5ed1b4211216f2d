# storefront/api/routers/users.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import RequestContext, get_context, get_notifier
from storefront.data.database import get_db
from storefront.domain.errors import AlreadyExistsError, NotFoundError
from storefront.domain.schemas import (
    AddressIn,
    AddressOut,
    DeviceOut,
    LoginIn,
    ProfileUpdate,
    RegisterIn,
    TokenOut,
    UserRead,
)
from storefront.services.address_service import AddressService
from storefront.services.auth_service import AuthService
from storefront.services.device_service import DeviceService
from storefront.services.notification_service import NotificationService

auth_router = APIRouter(prefix="/auth", tags=["auth"])
router = APIRouter(prefix="/settings", tags=["settings"])


# ---------- auth ----------

@auth_router.post("/register", response_model=TokenOut, status_code=201)
def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    service = AuthService(db, notifier)
    try:
        return service.register(payload.name, payload.email, payload.password, payload.phone)
    except AlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))


@auth_router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    service = AuthService(db)
    try:
        return service.login(payload.email, payload.password)
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))


@auth_router.get("/me", response_model=UserRead)
def me(ctx: RequestContext = Depends(get_context)):
    return ctx.user


# ---------- profile ----------

@router.get("/profile", response_model=UserRead)
def get_profile(ctx: RequestContext = Depends(get_context)):
    return ctx.user


@router.patch("/profile", response_model=UserRead)
def update_profile(payload: ProfileUpdate, ctx: RequestContext = Depends(get_context)):
    service = AuthService(ctx.db)
    return service.update_profile(ctx.user, payload.model_dump(exclude_unset=True))


# ---------- addresses ----------

@router.get("/addresses", response_model=List[AddressOut])
def list_addresses(ctx: RequestContext = Depends(get_context)):
    return AddressService(ctx.db).list_addresses(ctx.user.id)


@router.post("/addresses", response_model=AddressOut, status_code=201)
def create_address(payload: AddressIn, ctx: RequestContext = Depends(get_context)):
    return AddressService(ctx.db).create(ctx.user.id, payload.model_dump())


@router.put("/addresses/{address_id}", response_model=AddressOut)
def update_address(address_id: int, payload: AddressIn, ctx: RequestContext = Depends(get_context)):
    service = AddressService(ctx.db)
    try:
        return service.update(ctx.user.id, address_id, payload.model_dump())
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/addresses/{address_id}")
def delete_address(address_id: int, ctx: RequestContext = Depends(get_context)):
    service = AddressService(ctx.db)
    try:
        return service.delete(ctx.user.id, address_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ---------- devices ----------

@router.get("/devices", response_model=List[DeviceOut])
def list_devices(ctx: RequestContext = Depends(get_context)):
    return DeviceService(ctx.db).list_devices(ctx.user.id)


@router.delete("/devices/{device_id}")
def remove_device(device_id: int, ctx: RequestContext = Depends(get_context)):
    service = DeviceService(ctx.db)
    try:
        return service.remove(ctx.user.id, device_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/devices")
def remove_other_devices(ctx: RequestContext = Depends(get_context)):
    return DeviceService(ctx.db).remove_others(ctx.user.id)
