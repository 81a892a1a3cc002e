"""Generic CRUD router for content resources with an optional file field.

One router per ``CrudResource``. Bodies may be JSON or form data; in form
data the file part is named after the resource's attachment field. All
attachment decisions are delegated to the ``AttachmentManager``:

- create: store upload -> insert row (blob discarded if the insert fails)
- update: store upload -> update + commit row -> delete superseded blob
- delete: delete + commit row -> delete blob

Cleanup failures never fail the request; they are reported through the
``X-Attachment-Warning`` response header.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence, get_args, get_origin

from fastapi import APIRouter, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.params import Depends
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from school_cms.attachments import AttachmentsDep, StorageDeleteError, Upload
from school_cms.content.resources import CrudResource
from school_cms.db import UoWDep
from school_cms.exceptions import NotFoundError

logger = logging.getLogger(__name__)

WARNING_HEADER = "X-Attachment-Warning"
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _is_list_field(annotation: Any) -> bool:
    if get_origin(annotation) is list:
        return True
    return any(get_origin(arg) is list for arg in get_args(annotation))


def _list_keys(schema: type[BaseModel]) -> set[str]:
    keys: set[str] = set()
    for name, info in schema.model_fields.items():
        if _is_list_field(info.annotation):
            keys.update({name, info.alias or name})
    return keys


def _body_error(kind: str, msg: str, value: Any) -> RequestValidationError:
    return RequestValidationError([{"type": kind, "loc": ("body",), "msg": msg, "input": value}])


async def read_body(
    request: Request,
    schema: type[BaseModel],
    attachment_field: Optional[str],
    *,
    max_upload_bytes: Optional[int] = None,
) -> tuple[BaseModel, Optional[Upload]]:
    """Parse the request into ``schema`` plus the optional uploaded file."""
    content_type = request.headers.get("content-type", "")
    upload: Optional[Upload] = None
    data: dict[str, Any] = {}

    if content_type.startswith(FORM_CONTENT_TYPES):
        list_keys = _list_keys(schema)
        form = await request.form()
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                # browsers send an empty, unnamed part when no file was chosen
                if key == attachment_field and upload is None and value.filename:
                    upload = await Upload.from_upload_file(value, max_bytes=max_upload_bytes)
                continue
            if key in list_keys:
                data.setdefault(key, []).append(value)
            else:
                data[key] = value
    else:
        raw = await request.body()
        if raw:
            try:
                parsed = json.loads(raw)
            except ValueError:
                raise _body_error("json_invalid", "JSON decode error", raw.decode("utf-8", "replace"))
            if not isinstance(parsed, dict):
                raise _body_error("dict_type", "Input should be a valid dictionary", parsed)
            data = parsed

    try:
        payload = schema.model_validate(data)
    except ValidationError as exc:
        errors = [{**err, "loc": ("body", *err["loc"])} for err in exc.errors(include_url=False)]
        raise RequestValidationError(errors, body=data)
    return payload, upload


def _request_body_doc(schema: type[BaseModel], attachment_field: Optional[str]) -> dict[str, Any]:
    json_schema = schema.model_json_schema(by_alias=True)
    form_schema = json.loads(json.dumps(json_schema))
    if attachment_field:
        form_schema.setdefault("properties", {})[attachment_field] = {"type": "string", "format": "binary"}
    return {
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": json_schema},
                "multipart/form-data": {"schema": form_schema},
            },
        }
    }


def make_crud_router(
    resource: CrudResource,
    *,
    write_dependencies: Sequence[Depends] = (),
) -> APIRouter:
    router = APIRouter(prefix=resource.path, tags=[resource.tag])
    model = resource.model
    field = resource.attachment_field
    read_schema = resource.read_schema

    def deps_for(operation: str) -> list[Depends]:
        if operation in resource.public_operations:
            return []
        return list(write_dependencies)

    def not_found() -> NotFoundError:
        return NotFoundError(f"{resource.label} not found")

    async def serialize(row: Any, attachments) -> BaseModel:
        out = read_schema.model_validate(row)
        if field:
            url = await attachments.url_for(getattr(row, field))
            out = out.model_copy(update={resource.url_field: url})
        return out

    if resource.allows("list") and not resource.singleton:

        @router.get("", response_model=list[read_schema], name=f"list_{resource.name}")
        async def list_items(uow: UoWDep, attachments: AttachmentsDep):
            rows = await uow.repo(model).list()
            return [await serialize(row, attachments) for row in rows]

    if resource.allows("get"):
        if resource.singleton:

            @router.get("", response_model=read_schema, name=f"get_{resource.name}")
            async def get_singleton(uow: UoWDep, attachments: AttachmentsDep):
                row = await uow.repo(model).first()
                if row is None:
                    raise not_found()
                return await serialize(row, attachments)

        else:

            @router.get("/{id}", response_model=read_schema, name=f"get_{resource.name}")
            async def get_item(id: int, uow: UoWDep, attachments: AttachmentsDep):
                row = await uow.repo(model).get(id)
                if row is None:
                    raise not_found()
                return await serialize(row, attachments)

    if resource.allows("create") and not resource.singleton:

        @router.post(
            "",
            response_model=read_schema,
            status_code=status.HTTP_201_CREATED,
            name=f"create_{resource.name}",
            dependencies=deps_for("create"),
            openapi_extra=_request_body_doc(resource.create_schema, field),
        )
        async def create_item(request: Request, uow: UoWDep, attachments: AttachmentsDep):
            payload, upload = await read_body(
                request, resource.create_schema, field, max_upload_bytes=attachments.max_upload_bytes
            )
            values = payload.model_dump()
            ref = await attachments.resolve_for_create(upload, prefix=resource.key_prefix) if field else None
            if field:
                values[field] = ref
            try:
                row = await uow.repo(model).create(**values)
                await uow.commit()
            except Exception:
                await attachments.discard(ref)
                raise
            logger.info("Created %s id=%s", resource.name, row.id)
            return await serialize(row, attachments)

    if resource.allows("update") and resource.update_schema is not None:
        update_schema = resource.update_schema

        @router.put(
            "/{id}",
            response_model=read_schema,
            name=f"update_{resource.name}",
            dependencies=deps_for("update"),
            openapi_extra=_request_body_doc(update_schema, field),
        )
        async def update_item(
            id: int, request: Request, response: Response, uow: UoWDep, attachments: AttachmentsDep
        ):
            repo = uow.repo(model)
            row = await repo.get(id)
            if row is None:
                raise not_found()
            payload, upload = await read_body(
                request, update_schema, field, max_upload_bytes=attachments.max_upload_bytes
            )
            values = payload.model_dump(exclude_unset=True, exclude_none=True)

            if not field:
                row = await repo.update(id, **values)
                await uow.commit()
                return await serialize(row, attachments)

            async def persist(ref: Optional[str]):
                updated = await repo.update(id, **{**values, field: ref})
                await uow.commit()
                return updated

            resolution = await attachments.resolve_for_update(
                getattr(row, field), upload, prefix=resource.key_prefix, persist=persist
            )
            if resolution.cleanup_error is not None:
                response.headers[WARNING_HEADER] = f"superseded file {resolution.superseded} was not deleted"
            return await serialize(resolution.persisted, attachments)

    if resource.allows("delete") and not resource.singleton:

        @router.delete(
            "/{id}",
            status_code=status.HTTP_204_NO_CONTENT,
            name=f"delete_{resource.name}",
            dependencies=deps_for("delete"),
        )
        async def delete_item(id: int, uow: UoWDep, attachments: AttachmentsDep) -> Response:
            repo = uow.repo(model)
            row = await repo.get(id)
            if row is None:
                raise not_found()
            ref = getattr(row, field) if field else None
            await repo.delete(id)
            await uow.commit()
            logger.info("Deleted %s id=%s", resource.name, id)

            response = Response(status_code=status.HTTP_204_NO_CONTENT)
            try:
                await attachments.resolve_for_delete(ref)
            except StorageDeleteError as exc:
                logger.warning("Record %s/%s deleted but its file was not: %s", resource.name, id, exc)
                response.headers[WARNING_HEADER] = f"file {exc.ref} was not deleted"
            return response

    return router


__all__ = ["make_crud_router", "read_body", "WARNING_HEADER"]
