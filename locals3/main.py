import tempfile
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, File, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response

from .config import Settings
from .errors import ErrorKind, StoreError
from .filestore import FileStore
from .logging_config import configure_logging
from .models import UploadPayload
from .schemas import BucketCreate, BucketOut, ObjectOut

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 1024 * 1024

STATUS_BY_KIND = {
    ErrorKind.BUCKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.OBJECT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DIRECTORY_NOT_EMPTY: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_NAME: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNSUPPORTED_PAYLOAD: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    ErrorKind.CORRUPT_METADATA: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.IO_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _object_headers(obj) -> dict:
    return {
        "Content-Length": str(obj.size),
        "ETag": f'"{obj.md5}"',
        "Last-Modified": obj.modified_date.strftime("%a, %d %b %Y %H:%M:%S GMT"),
    }


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    store = FileStore(settings.storage_root)

    app = FastAPI(title="locals3")
    app.state.settings = settings
    app.state.store = store

    @app.on_event("startup")
    def startup():
        store.ensure_root()
        logger.info("storage_ready", root=str(store.root))

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        code = STATUS_BY_KIND[exc.kind]
        if code >= 500:
            logger.error("store_error", kind=exc.kind.value, path=str(exc.path), error=str(exc))
        return JSONResponse(status_code=code, content={"detail": exc.message, "kind": exc.kind.value})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/buckets", response_model=list[BucketOut])
    async def list_buckets():
        return await store.buckets.list()

    @app.post("/buckets", response_model=BucketOut, status_code=status.HTTP_201_CREATED)
    async def create_bucket(payload: BucketCreate):
        return await store.buckets.create(payload.name)

    @app.delete("/buckets/{bucket_name}", status_code=204)
    async def delete_bucket(bucket_name: str):
        bucket = await store.buckets.get(bucket_name)
        await store.buckets.delete(bucket)
        return None

    @app.get("/buckets/{bucket_name}/objects", response_model=list[ObjectOut])
    async def list_objects(bucket_name: str, prefix: Optional[str] = None):
        bucket = await store.buckets.get(bucket_name)
        objects = await store.objects.list(bucket, prefix=prefix)
        return [ObjectOut.model_validate(obj, from_attributes=True) for obj in objects]

    @app.put("/buckets/{bucket_name}/objects/{object_key:path}", response_model=ObjectOut)
    async def upload_object(
        request: Request,
        bucket_name: str,
        object_key: str,
        file: UploadFile = File(...),
    ):
        bucket = await store.buckets.get(bucket_name)

        with tempfile.NamedTemporaryFile() as tmp:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                tmp.write(chunk)
            tmp.flush()

            payload = UploadPayload(
                key=object_key,
                content_type=file.content_type or "application/octet-stream",
                temp_path=Path(tmp.name),
                headers=dict(request.headers),
            )
            obj = await store.objects.put(bucket, object_key, payload)
        return ObjectOut.model_validate(obj, from_attributes=True)

    @app.head("/buckets/{bucket_name}/objects/{object_key:path}")
    async def head_object(bucket_name: str, object_key: str):
        bucket = await store.buckets.get(bucket_name)
        obj = await store.objects.head(bucket, object_key)
        return Response(status_code=200, headers=_object_headers(obj))

    @app.get("/buckets/{bucket_name}/objects/{object_key:path}")
    async def download_object(bucket_name: str, object_key: str):
        bucket = await store.buckets.get(bucket_name)
        obj, content = await store.objects.get(bucket, object_key)
        return Response(content=content, media_type=obj.content_type, headers=_object_headers(obj))

    @app.delete("/buckets/{bucket_name}/objects/{object_key:path}", status_code=204)
    async def delete_object(bucket_name: str, object_key: str):
        bucket = await store.buckets.get(bucket_name)
        await store.objects.delete(bucket, object_key)
        return None

    return app


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level, json=settings.log_json)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
