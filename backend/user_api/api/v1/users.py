"""
User endpoints.

GET /user returns the configured default user, POST /user stores a new
one. Handlers talk to the database only through the injected
IDocumentStore.
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from user_api.api.dependencies import AppSettings, DocumentStore
from user_api.core.exceptions import StorageError
from user_api.core.logging_config import log_with_context
from user_api.models.user import User
from user_api.schemas.user import CreateUserResponse, ErrorResponse


logger = logging.getLogger(__name__)

router = APIRouter()

UNEXPECTED_ERROR = "Unexpected error"
USER_NOT_FOUND = "User not found"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


@router.get(
    "/user",
    response_model=User,
    response_model_exclude_none=True,
    responses={
        404: {"model": ErrorResponse, "description": "Default user does not exist"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Fetch the default user",
)
async def get_user(
    request: Request,
    store: DocumentStore,
    config: AppSettings,
):
    """
    Fetch the user whose id equals DEFAULT_USER_ID.

    Returns:
        200 with the user record (email omitted when absent)
        404 if no such user is stored
        500 on storage failure; the error detail only goes to the logs
    """
    try:
        user = await store.find_one(
            config.database_name,
            config.users_collection,
            User,
            {"id": config.default_user_id},
            None,
        )
    except StorageError:
        log_with_context(
            logger,
            "error",
            "Failed to fetch user",
            request_id=getattr(request.state, "request_id", None),
            database=config.database_name,
            collection=config.users_collection,
            exc_info=True,
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR)

    if user is None:
        return _error_response(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)

    return user


@router.post(
    "/user",
    response_model=CreateUserResponse,
    status_code=status.HTTP_200_OK,
    responses={
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Create a user",
)
async def create_user(
    request: Request,
    user: User,
    store: DocumentStore,
    config: AppSettings,
):
    """
    Store the user from the request body.

    Returns:
        200 {"success": true, "insertedID": "<id>"}
        500 {"success": false, "message": "Unexpected error"} on storage
        failure; the error detail only goes to the logs
    """
    try:
        result = await store.insert_one(
            config.database_name,
            config.users_collection,
            user,
            None,
        )
    except StorageError:
        log_with_context(
            logger,
            "error",
            "Failed to insert user",
            request_id=getattr(request.state, "request_id", None),
            database=config.database_name,
            collection=config.users_collection,
            exc_info=True,
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR)

    return CreateUserResponse(inserted_id=result.inserted_id)
