"""
gcp_gcs
-------

합성된 정의 파일(pipeline.json / buildspec.yml)을 GCS 버킷에 올리는 모듈.
외부 플랫폼은 이 버킷에서 정의를 가져간다.
"""

from __future__ import annotations

import os
from typing import List

from google.api_core.exceptions import GoogleAPICallError
from google.cloud import storage

from .config import PipelineConfig
from .logging_utils import get_logger


logger = get_logger(__name__)


def _object_name(cfg: PipelineConfig, path: str) -> str:
    base = os.path.basename(path)
    prefix = (cfg.definition_prefix or "").strip("/")
    parts = [p for p in (prefix, cfg.pipeline_name, base) if p]
    return "/".join(parts)


def publish_definition(cfg: PipelineConfig, paths: List[str]) -> List[str]:
    """
    정의 파일들을 DEFINITION_BUCKET 에 업로드하고 gs:// URI 목록을 돌려준다.
    버킷은 만들지 않는다.
    """
    if not cfg.definition_bucket:
        raise ValueError("publish 를 하려면 DEFINITION_BUCKET 환경변수가 필요합니다.")

    client = storage.Client(project=cfg.definition_project_id)
    bucket = client.bucket(cfg.definition_bucket)

    uploaded: List[str] = []
    for path in paths:
        object_name = _object_name(cfg, path)
        blob = bucket.blob(object_name)
        try:
            blob.upload_from_filename(path)
        except GoogleAPICallError as e:
            raise RuntimeError(
                f"정의 파일 업로드에 실패했습니다: {path} -> gs://{cfg.definition_bucket}/{object_name}"
            ) from e
        uri = f"gs://{cfg.definition_bucket}/{object_name}"
        logger.info("정의 파일 업로드 완료: %s", uri)
        uploaded.append(uri)

    return uploaded


def check_bucket(cfg: PipelineConfig) -> str:
    """
    정의 버킷 존재 여부를 확인만 하고, 생성하지 않는다.
    """
    if not cfg.definition_bucket:
        return "GCS: DEFINITION_BUCKET 미설정 (publish 사용 안 함)"

    client = storage.Client(project=cfg.definition_project_id)
    bucket = client.bucket(cfg.definition_bucket)
    try:
        exists = bucket.exists()
    except GoogleAPICallError as e:
        return f"GCS: 조회 실패 ({cfg.definition_bucket}, {e.__class__.__name__})"

    if exists:
        return f"GCS: 버킷 존재함 ({cfg.definition_bucket})"
    return f"GCS: 버킷 없음 (수동 생성이 필요함) ({cfg.definition_bucket})"
