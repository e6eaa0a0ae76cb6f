"""FastAPI endpoints for the Marketplace domain.

Crop catalog routes go through ``CropCatalog``; interest routes go through
``InterestWorkflow``. Both receive the Catalog Store through ``Depends``, so
tests can override ``get_store`` to swap the store underneath them.
"""

from fastapi import APIRouter, Depends

from marketplace.api.schemas import (
    CropIdResponse,
    CropResponse,
    DecideInterestRequest,
    InterestIdResponse,
    InterestResponse,
    ListCropRequest,
    StatusResponse,
    SubmitInterestRequest,
    UpdateCropRequest,
)
from marketplace.config import WorkflowSettings
from marketplace.crop.catalog import CropCatalog
from marketplace.crop.workflow import InterestWorkflow
from marketplace.store import CatalogStore, get_store

crop_router = APIRouter(prefix="/crops", tags=["crops"])
account_router = APIRouter(tags=["accounts"])


def get_catalog(store: CatalogStore = Depends(get_store)) -> CropCatalog:
    return CropCatalog(store)


def get_workflow(store: CatalogStore = Depends(get_store)) -> InterestWorkflow:
    return InterestWorkflow(store, WorkflowSettings.from_env())


# --- Crop endpoints ---


@crop_router.get("", response_model=list[CropResponse])
async def search_crops(search: str | None = None, catalog: CropCatalog = Depends(get_catalog)):
    return [CropResponse.from_crop(crop) for crop in catalog.search(search)]


@crop_router.get("/latest", response_model=list[CropResponse])
async def latest_crops(catalog: CropCatalog = Depends(get_catalog)):
    return [CropResponse.from_crop(crop) for crop in catalog.latest()]


@crop_router.post("", status_code=201, response_model=CropIdResponse)
async def list_crop(body: ListCropRequest, catalog: CropCatalog = Depends(get_catalog)) -> CropIdResponse:
    crop_id = catalog.list_crop(
        name=body.name,
        quantity=body.quantity,
        owner_name=body.owner_name,
        owner_email=body.owner_email,
        image=body.image,
        location=body.location,
        price_per_unit=body.price_per_unit,
    )
    return CropIdResponse(crop_id=crop_id)


@crop_router.get("/{crop_id}", response_model=CropResponse)
async def get_crop(crop_id: str, catalog: CropCatalog = Depends(get_catalog)) -> CropResponse:
    return CropResponse.from_crop(catalog.get(crop_id))


@crop_router.patch("/{crop_id}", response_model=CropResponse)
async def update_crop(
    crop_id: str, body: UpdateCropRequest, catalog: CropCatalog = Depends(get_catalog)
) -> CropResponse:
    crop = catalog.update(crop_id, **body.model_dump(exclude_none=True))
    return CropResponse.from_crop(crop)


@crop_router.delete("/{crop_id}", response_model=StatusResponse)
async def delist_crop(crop_id: str, catalog: CropCatalog = Depends(get_catalog)) -> StatusResponse:
    catalog.delist(crop_id)
    return StatusResponse()


# --- Interest endpoints ---


@crop_router.post("/{crop_id}/interests", status_code=201, response_model=InterestIdResponse)
async def submit_interest(
    crop_id: str, body: SubmitInterestRequest, workflow: InterestWorkflow = Depends(get_workflow)
) -> InterestIdResponse:
    interest = workflow.submit_interest(
        crop_id,
        user_email=body.user_email,
        quantity=body.quantity,
        message=body.message,
        user_name=body.user_name,
    )
    return InterestIdResponse(interest_id=str(interest.id), status=interest.status)


@crop_router.get("/{crop_id}/interests", response_model=list[InterestResponse])
async def crop_interests(crop_id: str, workflow: InterestWorkflow = Depends(get_workflow)):
    return [InterestResponse(**view.to_dict()) for view in workflow.list_interests_for_crop(crop_id)]


@crop_router.put("/{crop_id}/interests/{interest_id}", response_model=StatusResponse)
async def decide_interest(
    crop_id: str,
    interest_id: str,
    body: DecideInterestRequest,
    workflow: InterestWorkflow = Depends(get_workflow),
) -> StatusResponse:
    workflow.decide_interest(crop_id, interest_id, body.status)
    return StatusResponse()


# --- Per-account endpoints ---


@account_router.get("/my-crops/{owner_email}", response_model=list[CropResponse])
async def my_crops(owner_email: str, catalog: CropCatalog = Depends(get_catalog)):
    return [CropResponse.from_crop(crop) for crop in catalog.owned_by(owner_email)]


@account_router.get("/my-interests/{user_email}", response_model=list[InterestResponse])
async def my_interests(user_email: str, workflow: InterestWorkflow = Depends(get_workflow)):
    return [InterestResponse(**view.to_dict()) for view in workflow.list_interests_for_user(user_email)]


@account_router.get("/interests", response_model=list[InterestResponse])
async def interests_by_user(user_email: str, workflow: InterestWorkflow = Depends(get_workflow)):
    return [InterestResponse(**view.to_dict()) for view in workflow.list_interests_for_user(user_email)]
